"""Deprecated ``util.is*()`` predicates to their native equivalents.

Each predicate is one ``Predicate`` variant whose ``render`` turns the
argument text into the replacement expression::

    util.isArray(x)             ->  Array.isArray(x)
    util.isNullOrUndefined(x)   ->  x === null || x === undefined
    util.isObject(x)            ->  x && typeof x === 'object'

Calls with anything but exactly one plain argument are left as they are,
which keeps the import alive.
"""

from __future__ import annotations

from dataclasses import dataclass

from nodemod.core.logging import get_logger
from nodemod.engine.edits import EditScript
from nodemod.engine.types import Edit, ImportSite
from nodemod.engine.usage import call_arguments, find_calls, find_usages
from nodemod.recipes.base import Recipe, bindings_for, finish, outermost, prune, splice, use_text
from nodemod.syntax.tree import Node, SourceFile, is_inside, node_text

log = get_logger(__name__)

# Operands that never need parentheses around them
_ATOMIC_KINDS = frozenset({
    "identifier",
    "member_expression",
    "subscript_expression",
    "call_expression",
    "parenthesized_expression",
    "this",
    "string",
    "template_string",
    "number",
    "array",
    "null",
    "undefined",
    "true",
    "false",
})

# Parents in which a binary/typeof replacement reads the same without parentheses
_LOOSE_PARENTS = frozenset({
    "parenthesized_expression",
    "expression_statement",
    "arguments",
    "variable_declarator",
    "return_statement",
    "assignment_expression",
    "arrow_function",
    "pair",
    "array",
})


@dataclass(frozen=True)
class Predicate:
    """One ``util.is*`` function and its native replacement."""

    name: str
    template: str  # {value} is the argument
    reference: str | None = None  # replacement when the function itself is passed around

    @property
    def is_call(self) -> bool:
        return self.template.endswith("({value})") and self.template.count("{value}") == 1

    @property
    def binding_path(self) -> str:
        return f"$.{self.name}"

    def render(self, value: str, *, atomic: bool = True, loose: bool = True) -> str:
        if not self.is_call and not atomic:
            value = f"({value})"
        text = self.template.format(value=value)
        if not self.is_call and not loose:
            text = f"({text})"
        return text


PREDICATES: tuple[Predicate, ...] = (
    Predicate("isArray", "Array.isArray({value})", reference="Array.isArray"),
    Predicate("isBoolean", "typeof {value} === 'boolean'"),
    Predicate("isBuffer", "Buffer.isBuffer({value})", reference="Buffer.isBuffer"),
    Predicate("isDate", "{value} instanceof Date"),
    Predicate("isError", "Error.isError({value})", reference="Error.isError"),
    Predicate("isFunction", "typeof {value} === 'function'"),
    Predicate("isNull", "{value} === null"),
    Predicate("isNullOrUndefined", "{value} === null || {value} === undefined"),
    Predicate("isNumber", "typeof {value} === 'number'"),
    Predicate("isObject", "{value} && typeof {value} === 'object'"),
    Predicate("isPrimitive", "Object({value}) !== {value}"),
    Predicate("isRegExp", "{value} instanceof RegExp"),
    Predicate("isString", "typeof {value} === 'string'"),
    Predicate("isSymbol", "typeof {value} === 'symbol'"),
    Predicate("isUndefined", "typeof {value} === 'undefined'"),
)


@dataclass(frozen=True)
class _Rewrite:
    node: Node  # the call, or the bare reference
    predicate: Predicate
    is_call: bool


def _single_argument(call: Node) -> Node | None:
    args = call_arguments(call)
    if len(args) != 1 or args[0].type == "spread_element":
        return None
    return args[0]


def _render(source: SourceFile, rewrite: _Rewrite, pending: list[_Rewrite]) -> str:
    if not rewrite.is_call:
        return use_text(rewrite.node, rewrite.predicate.reference or node_text(rewrite.node))
    arg = _single_argument(rewrite.node)
    assert arg is not None
    nested = [r for r in pending if r is not rewrite and is_inside(r.node, arg)]
    direct = {id(n) for n in outermost([r.node for r in nested])}
    inner = [(r.node, _render(source, r, nested)) for r in nested if id(r.node) in direct]
    parent = rewrite.node.parent
    return rewrite.predicate.render(
        splice(source, arg, inner),
        atomic=arg.type in _ATOMIC_KINDS,
        loose=parent is None or parent.type in _LOOSE_PARENTS,
    )


def transform(source: SourceFile) -> str | None:
    script = EditScript()
    roots: dict[ImportSite, list[str]] = {}
    rewritten: dict[ImportSite, list[Node]] = {}
    pending: list[_Rewrite] = []

    for predicate in PREDICATES:
        for site, resolved in bindings_for(source, "util", predicate.binding_path):
            calls = [c for c in find_calls(source, resolved.expression, exclude=[site]) if _single_argument(c)]
            callees = [c.child_by_field_name("function") for c in calls]
            starts = {n.start_byte for n in callees}
            refs: list[Node] = []
            if predicate.reference is not None:
                refs = [
                    n
                    for n in find_usages(source, resolved.expression, exclude=[site])
                    if n.start_byte not in starts
                ]
            pending.extend(_Rewrite(c, predicate, True) for c in calls)
            pending.extend(_Rewrite(n, predicate, False) for n in refs)
            roots.setdefault(site, []).append(resolved.root)
            rewritten.setdefault(site, []).extend([*callees, *refs])

    top = {id(n) for n in outermost([r.node for r in pending])}
    for rewrite in pending:
        if id(rewrite.node) in top:
            script.add(Edit.replace(rewrite.node, _render(source, rewrite, pending)))
    log.debug("predicates_rewritten", path=str(source.path), count=len(pending))

    prune(source, script, roots, rewritten)
    return finish(source, script)


RECIPE = Recipe(
    name="util-is",
    description="Replace the deprecated util.is*() type checks with native expressions",
    transform=transform,
    modules=("util",),
)
