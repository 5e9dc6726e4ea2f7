"""Module dependency locator.

Finds every statement that brings a given module into scope:

- ``const x = require("m")``, ``const { a, b: c } = require("m")``,
  ``const a = require("m").a``
- ``import x from "m"``, ``import * as ns from "m"``, ``import { a as b } from "m"``,
  ``import x = require("m")`` (TypeScript)
- ``const x = await import("m")``, ``import("m").then(({ a }) => ...)``

A bare ``require("m")`` or ``import("m")`` whose result is not bound is not a
site: it binds nothing a recipe could rewrite.

``"m"`` and ``"node:m"`` name the same module. Matching is exact, so ``fs``
never matches ``fs-extra``.
"""

from __future__ import annotations

from nodemod.core.logging import get_logger
from nodemod.engine.types import (
    ImportSite,
    Specifier,
    SpecifierKind,
    normalize_module,
)
from nodemod.syntax.packs import get_pack
from nodemod.syntax.tree import (
    Node,
    SourceFile,
    ancestors,
    named_children,
    node_text,
    query_captures,
    string_value,
)

log = get_logger(__name__)

_DECLARATION_KINDS = frozenset({"lexical_declaration", "variable_declaration"})
_FUNCTION_KINDS = frozenset({"arrow_function", "function_expression", "function"})


def _matches(literal: Node | None, module_name: str) -> str | None:
    """Return the literal's text if it names ``module_name``."""
    value = string_value(literal)
    if value is None or normalize_module(value) != normalize_module(module_name):
        return None
    return value


def _candidates(source: SourceFile, kind: str) -> list[Node]:
    pack = get_pack(source.language)
    if pack is None:
        return []
    nodes = query_captures(source, pack.import_query).get("site", [])
    return sorted((n for n in nodes if n.type == kind), key=lambda n: n.start_byte)


def _first_argument(call: Node) -> Node | None:
    args = call.child_by_field_name("arguments")
    if args is None:
        return None
    named = named_children(args)
    return named[0] if named else None


def _declaration_statement(declarator: Node) -> Node:
    declaration = declarator.parent
    if declaration is None or declaration.type not in _DECLARATION_KINDS:
        return declarator
    if declaration.parent is not None and declaration.parent.type == "export_statement":
        return declaration.parent
    return declaration


def _enclosing_statement(node: Node) -> Node:
    for ancestor in ancestors(node):
        if ancestor.type == "expression_statement" or ancestor.type in _DECLARATION_KINDS:
            return ancestor
    return node


# =========================================================================
# Specifier extraction
# =========================================================================


def _pattern_specifiers(pattern: Node, prefix: tuple[str, ...]) -> list[Specifier]:
    """Specifiers bound by an object destructuring pattern."""
    specs: list[Specifier] = []
    for entry in named_children(pattern):
        if entry.type == "shorthand_property_identifier_pattern":
            name = node_text(entry)
            specs.append(
                Specifier(
                    imported=".".join((*prefix, name)),
                    local=name,
                    kind=SpecifierKind.DESTRUCTURED_SHORTHAND,
                    entry=entry,
                    container=pattern,
                    name_node=entry,
                    local_node=entry,
                )
            )
        elif entry.type == "object_assignment_pattern":
            # { a = 1 }
            left = entry.child_by_field_name("left")
            if left is not None and left.type == "shorthand_property_identifier_pattern":
                name = node_text(left)
                specs.append(
                    Specifier(
                        imported=".".join((*prefix, name)),
                        local=name,
                        kind=SpecifierKind.DESTRUCTURED_SHORTHAND,
                        entry=entry,
                        container=pattern,
                        name_node=left,
                        local_node=left,
                    )
                )
        elif entry.type == "pair_pattern":
            key = entry.child_by_field_name("key")
            value = entry.child_by_field_name("value")
            if key is None or value is None:
                continue
            key_name = string_value(key) if key.type == "string" else None
            if key.type == "property_identifier":
                key_name = node_text(key)
            if not key_name:
                continue  # computed keys
            if value.type == "assignment_pattern":
                value = value.child_by_field_name("left")
                if value is None:
                    continue
            if value.type == "identifier":
                specs.append(
                    Specifier(
                        imported=".".join((*prefix, key_name)),
                        local=node_text(value),
                        kind=SpecifierKind.DESTRUCTURED_ALIASED,
                        entry=entry,
                        container=pattern,
                        name_node=key,
                        local_node=value,
                    )
                )
            elif value.type == "object_pattern":
                specs.extend(_pattern_specifiers(value, (*prefix, key_name)))
    return specs


def _binding_specifiers(name: Node, member_path: tuple[str, ...]) -> tuple[Specifier, ...]:
    """Specifiers for the left-hand side of a require/import declarator."""
    if name.type == "identifier":
        if member_path:
            return (
                Specifier(
                    imported=".".join(member_path),
                    local=node_text(name),
                    kind=SpecifierKind.NAMED,
                    entry=name,
                    local_node=name,
                ),
            )
        return (
            Specifier(
                imported=None,
                local=node_text(name),
                kind=SpecifierKind.NAMESPACE,
                entry=name,
                local_node=name,
            ),
        )
    if name.type == "object_pattern":
        return tuple(_pattern_specifiers(name, member_path))
    return ()


def _import_clause_specifiers(clause: Node) -> list[Specifier]:
    specs: list[Specifier] = []
    for part in named_children(clause):
        if part.type == "identifier":
            specs.append(
                Specifier(
                    imported=None,
                    local=node_text(part),
                    kind=SpecifierKind.DEFAULT,
                    entry=part,
                    container=clause,
                    local_node=part,
                )
            )
        elif part.type == "namespace_import":
            ident = next((c for c in part.named_children if c.type == "identifier"), None)
            if ident is not None:
                specs.append(
                    Specifier(
                        imported=None,
                        local=node_text(ident),
                        kind=SpecifierKind.NAMESPACE,
                        entry=part,
                        container=clause,
                        local_node=ident,
                    )
                )
        elif part.type == "named_imports":
            for spec in named_children(part):
                if spec.type != "import_specifier":
                    continue
                name = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias")
                imported = string_value(name) if name is not None and name.type == "string" else node_text(name)
                if not imported:
                    continue
                specs.append(
                    Specifier(
                        imported=imported,
                        local=node_text(alias) if alias is not None else imported,
                        kind=SpecifierKind.NAMED,
                        entry=spec,
                        container=part,
                        name_node=name,
                        local_node=alias if alias is not None else name,
                    )
                )
    return specs


# =========================================================================
# Per-form queries
# =========================================================================


def _unwrap_members(value: Node) -> tuple[Node, tuple[str, ...]]:
    """Peel ``x.a.b`` down to ``x``, returning ``(x, ("a", "b"))``."""
    path: list[str] = []
    while value.type == "member_expression":
        prop = value.child_by_field_name("property")
        obj = value.child_by_field_name("object")
        if prop is None or obj is None or prop.type != "property_identifier":
            break
        path.insert(0, node_text(prop))
        value = obj
    return value, tuple(path)


def _require_source(call: Node, module_name: str) -> str | None:
    if call.type != "call_expression":
        return None
    func = call.child_by_field_name("function")
    if func is None or func.type != "identifier" or node_text(func) != "require":
        return None
    return _matches(_first_argument(call), module_name)


def _dynamic_import_source(call: Node, module_name: str) -> str | None:
    if call.type != "call_expression":
        return None
    func = call.child_by_field_name("function")
    if func is None or func.type != "import":
        return None
    return _matches(_first_argument(call), module_name)


def get_require_calls(source: SourceFile, module_name: str) -> list[ImportSite]:
    """Declarators bound to ``require(module_name)`` (optionally followed by member access)."""
    sites: list[ImportSite] = []
    for declarator in _candidates(source, "variable_declarator"):
        name = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name is None or value is None:
            continue
        call, member_path = _unwrap_members(value)
        literal = _require_source(call, module_name)
        if literal is None:
            continue
        sites.append(
            ImportSite(
                form="require_call",
                source=literal,
                node=declarator,
                statement=_declaration_statement(declarator),
                binding=name,
                specifiers=_binding_specifiers(name, member_path),
                member_path=member_path,
            )
        )
    return sites


def get_import_statements(source: SourceFile, module_name: str) -> list[ImportSite]:
    """Static ``import ... from`` statements for ``module_name``."""
    sites: list[ImportSite] = []
    for stmt in _candidates(source, "import_statement"):
        literal = _matches(stmt.child_by_field_name("source"), module_name)
        clause = next((c for c in stmt.named_children if c.type == "import_clause"), None)
        specs: list[Specifier] = []
        binding: Node | None = clause
        if literal is not None:
            if clause is None:
                continue  # import "m" binds nothing
            specs = _import_clause_specifiers(clause)
        else:
            # TypeScript: import fs = require("fs")
            req = next((c for c in stmt.named_children if c.type == "import_require_clause"), None)
            if req is None:
                continue
            literal = _matches(req.child_by_field_name("source"), module_name)
            ident = next((c for c in req.named_children if c.type == "identifier"), None)
            if literal is None or ident is None:
                continue
            binding = ident
            specs = [
                Specifier(
                    imported=None,
                    local=node_text(ident),
                    kind=SpecifierKind.NAMESPACE,
                    entry=ident,
                    local_node=ident,
                )
            ]
        sites.append(
            ImportSite(
                form="static_import",
                source=literal,
                node=stmt,
                statement=stmt,
                binding=binding,
                specifiers=tuple(specs),
            )
        )
    return sites


def get_import_calls(source: SourceFile, module_name: str) -> list[ImportSite]:
    """Bound dynamic imports: ``= await import(m)`` and ``import(m).then(cb)``."""
    sites: list[ImportSite] = []

    for declarator in _candidates(source, "variable_declarator"):
        name = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name is None or value is None or value.type != "await_expression":
            continue
        inner = next(iter(named_children(value)), None)
        literal = _dynamic_import_source(inner, module_name) if inner is not None else None
        if literal is None:
            continue
        sites.append(
            ImportSite(
                form="dynamic_import",
                source=literal,
                node=declarator,
                statement=_declaration_statement(declarator),
                binding=name,
                specifiers=_binding_specifiers(name, ()),
            )
        )

    for call in _candidates(source, "call_expression"):
        func = call.child_by_field_name("function")
        obj = func.child_by_field_name("object") if func is not None else None
        prop = func.child_by_field_name("property") if func is not None else None
        if obj is None or prop is None or node_text(prop) != "then":
            continue
        literal = _dynamic_import_source(obj, module_name)
        if literal is None:
            continue
        param = _callback_parameter(_first_argument(call))
        if param is None:
            continue  # .then(() => ...) binds nothing
        sites.append(
            ImportSite(
                form="dynamic_import",
                source=literal,
                node=call,
                statement=_enclosing_statement(call),
                binding=param,
                specifiers=_binding_specifiers(param, ()),
                is_promise=True,
            )
        )

    return sorted(sites, key=lambda s: s.node.start_byte)


def _callback_parameter(callback: Node | None) -> Node | None:
    if callback is None or callback.type not in _FUNCTION_KINDS:
        return None
    single = callback.child_by_field_name("parameter")
    if single is not None:
        return single
    params = callback.child_by_field_name("parameters")
    if params is None:
        return None
    named = named_children(params)
    if not named:
        return None
    # TypeScript wraps each parameter: required_parameter(pattern: ..., type: ...)
    if named[0].type in ("required_parameter", "optional_parameter"):
        return named[0].child_by_field_name("pattern")
    return named[0]


def get_module_dependencies(source: SourceFile, module_name: str) -> list[ImportSite]:
    """All sites for ``module_name``: require calls, static imports, then dynamic imports."""
    sites = [
        *get_require_calls(source, module_name),
        *get_import_statements(source, module_name),
        *get_import_calls(source, module_name),
    ]
    log.debug(
        "module_sites_located",
        module=module_name,
        path=str(source.path),
        count=len(sites),
    )
    return sites


locate = get_module_dependencies
