"""Removing and renaming one binding of an import site.

Both operations return a ``BindingChange``:

- ``line_to_remove`` when the binding was the last one of its statement,
  so the whole statement goes away
  (``const { fips } = require("crypto")`` is deleted, never left as
  ``const {} = require("crypto")``);
- ``edit`` otherwise, touching only the one entry and its separating comma
  so the remaining entries keep their text, order and aliases;
- neither when the site does not bind the name, which makes a second call
  after the first one was committed a no-op.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from nodemod.core.logging import get_logger
from nodemod.engine.types import (
    BindingChange,
    Edit,
    ImportSite,
    LineRange,
    Specifier,
    SpecifierKind,
)
from nodemod.syntax.tree import Node, named_children, node_text

log = get_logger(__name__)

_DECLARATION_KINDS = frozenset({"lexical_declaration", "variable_declaration"})


def _same(a: Node, b: Node) -> bool:
    return a.start_byte == b.start_byte and a.end_byte == b.end_byte and a.type == b.type


def _entries(container: Node) -> list[Node]:
    """Entries of a binding list, in source order."""
    if container.type == "named_imports":
        return [c for c in container.named_children if c.type == "import_specifier"]
    if container.type in _DECLARATION_KINDS:
        return [c for c in container.named_children if c.type == "variable_declarator"]
    return named_children(container)


def _delete_entry(entries: list[Node], entry: Node) -> Edit:
    """Delete ``entry`` together with one adjacent separator."""
    index = next(i for i, e in enumerate(entries) if _same(e, entry))
    if index + 1 < len(entries):
        return Edit.delete(entry.start_byte, entries[index + 1].start_byte)
    return Edit.delete(entries[index - 1].end_byte, entry.end_byte)


def _remove_site(site: ImportSite) -> BindingChange:
    """Drop every binding of the site."""
    if site.is_promise:
        param = site.binding
        if param is None:
            return BindingChange()
        if param.parent is not None and param.parent.type in ("required_parameter", "optional_parameter"):
            param = param.parent
        if param.parent is not None and param.parent.type == "formal_parameters":
            return BindingChange(edit=Edit.delete(param.start_byte, param.end_byte))
        return BindingChange(edit=Edit.replace(param, "()"))

    declaration = site.node.parent
    if site.node.type == "variable_declarator" and declaration is not None:
        declarators = _entries(declaration) if declaration.type in _DECLARATION_KINDS else []
        if len(declarators) > 1:
            return BindingChange(edit=_delete_entry(declarators, site.node))

    return BindingChange(line_to_remove=LineRange.of(site.statement))


def _drop(site: ImportSite, entry: Node, container: Node | None) -> BindingChange:
    """Remove ``entry`` from ``container``, collapsing lists that become empty."""
    if container is None:
        return _remove_site(site)

    entries = _entries(container)
    if len(entries) > 1:
        return BindingChange(edit=_delete_entry(entries, entry))

    if container.type == "named_imports" and container.parent is not None:
        return _drop(site, container, container.parent)
    if container.type == "object_pattern":
        parent = container.parent
        if parent is not None and parent.type == "pair_pattern":
            # { types: { isNativeError } } -> drop the whole `types` entry
            return _drop(site, parent, parent.parent)
    return _remove_site(site)


def remove_binding(site: ImportSite, name: str) -> BindingChange:
    """Remove the binding named ``name`` (local name first, then imported name)."""
    spec = site.find(name)
    if spec is None:
        return BindingChange()
    change = _drop(site, spec.entry, spec.container)
    log.debug(
        "binding_removed",
        name=name,
        module=site.module,
        line=site.line,
        whole_statement=change.line_to_remove is not None,
    )
    return change


def _lift(container: Node) -> tuple[Node, Node] | None:
    """``(parent_container, entry)`` that disappears with an emptied ``container``."""
    parent = container.parent
    if parent is None:
        return None
    if container.type == "named_imports" and parent.type == "import_clause":
        return parent, container
    if container.type == "object_pattern" and parent.type == "pair_pattern" and parent.parent is not None:
        return parent.parent, parent
    return None


def _delete_runs(entries: list[Node], doomed: list[Node]) -> list[Edit]:
    """One deletion per run of consecutive doomed entries, separators included."""
    flags = [any(_same(e, d) for d in doomed) for e in entries]
    edits: list[Edit] = []
    i = 0
    while i < len(entries):
        if not flags[i]:
            i += 1
            continue
        j = i
        while j + 1 < len(entries) and flags[j + 1]:
            j += 1
        if j + 1 < len(entries):
            edits.append(Edit.delete(entries[i].start_byte, entries[j + 1].start_byte))
        else:
            edits.append(Edit.delete(entries[i - 1].end_byte, entries[j].end_byte))
        i = j + 1
    return edits


def _plan_removal(site: ImportSite, names: Sequence[str]) -> list[BindingChange] | None:
    """Entry deletions for ``names``, or None when the whole site goes away."""
    specs: list[Specifier] = []
    for name in dict.fromkeys(names):
        spec = site.find(name)
        if spec is not None and spec not in specs:
            specs.append(spec)
    if not specs:
        return []
    if any(spec.container is None for spec in specs):
        return None

    doomed: dict[tuple[int, int, str], tuple[Node, list[Node]]] = {}
    stack = [(spec.container, spec.entry) for spec in specs if spec.container is not None]
    while stack:
        container, entry = stack.pop()
        _, entries = doomed.setdefault((container.start_byte, container.end_byte, container.type), (container, []))
        if any(_same(e, entry) for e in entries):
            continue
        entries.append(entry)
        if len(entries) < len(_entries(container)):
            continue
        lifted = _lift(container)
        if lifted is None:
            return None
        stack.append(lifted)

    changes: list[BindingChange] = []
    for container, entries in doomed.values():
        listed = _entries(container)
        if len(entries) == len(listed):
            continue  # removed through its parent entry
        changes.extend(BindingChange(edit=edit) for edit in _delete_runs(listed, entries))
    return changes


def _remove_sites(sites: list[ImportSite]) -> list[BindingChange]:
    """Drop every binding of ``sites``, one change per declaration they share.

    Declarators of one declaration are deleted as runs; a declaration losing
    all of its declarators is removed as a whole statement.
    """
    changes: list[BindingChange] = []
    shared: dict[tuple[int, int], tuple[Node, list[ImportSite]]] = {}
    for site in sites:
        declaration = site.node.parent
        if (
            site.node.type == "variable_declarator"
            and declaration is not None
            and declaration.type in _DECLARATION_KINDS
        ):
            shared.setdefault((declaration.start_byte, declaration.end_byte), (declaration, []))[1].append(site)
        else:
            changes.append(_remove_site(site))

    for declaration, members in shared.values():
        declarators = _entries(declaration)
        doomed = [site.node for site in members]
        if all(any(_same(d, n) for n in doomed) for d in declarators):
            changes.append(BindingChange(line_to_remove=LineRange.of(members[0].statement)))
        else:
            changes.extend(BindingChange(edit=edit) for edit in _delete_runs(declarators, doomed))
    return changes


def remove_site_bindings(removals: Mapping[ImportSite, Sequence[str]]) -> list[BindingChange]:
    """Remove bindings from several sites of one file at once.

    Sites that lose every binding are removed together, so two declarators of
    ``const a = require("m"), b = require("m")`` never yield overlapping
    deletions.
    """
    changes: list[BindingChange] = []
    emptied: list[ImportSite] = []
    for site, names in removals.items():
        planned = _plan_removal(site, names)
        if planned is None:
            emptied.append(site)
        elif planned:
            changes.extend(planned)
        else:
            continue
        log.debug(
            "bindings_removed",
            names=list(names),
            module=site.module,
            line=site.line,
            whole_site=planned is None,
        )
    changes.extend(_remove_sites(emptied))
    return changes


def remove_bindings(site: ImportSite, names: Sequence[str]) -> list[BindingChange]:
    """Remove several bindings of one site at once.

    Removing entries one by one from the same list would produce overlapping
    deletions; here adjacent entries are deleted as a single run and a list
    emptied by the removal takes its parent entry (or the statement) with it.
    """
    return remove_site_bindings({site: names})


def _siblings(site: ImportSite, spec: Specifier) -> set[str]:
    return {
        s.local
        for s in site.specifiers
        if s is not spec and s.container is not None and spec.container is not None
        and _same(s.container, spec.container)
    }


def _member_require_value(site: ImportSite) -> str:
    """``require("m").a.b`` minus its last member: the object being destructured."""
    value = site.node.child_by_field_name("value")
    if value is None:
        return ""
    obj = value.child_by_field_name("object")
    return node_text(obj)


def _rename_module_binding(site: ImportSite, spec: Specifier, names: list[str]) -> BindingChange:
    """Rename (one name) or destructure (several names) a namespace/default binding."""
    local_node = spec.local_node or spec.entry
    if len(names) == 1:
        return BindingChange(edit=Edit.replace(local_node, names[0]))

    listing = "{ " + ", ".join(names) + " }"

    if spec.container is None:
        if site.node.type == "variable_declarator" or site.is_promise:
            parent = local_node.parent
            if site.is_promise and parent is not None and parent.type == "arrow_function":
                # bare arrow parameter: m => ...
                return BindingChange(edit=Edit.replace(local_node, f"({listing})"))
            return BindingChange(edit=Edit.replace(local_node, listing))
        log.debug("binding_update_unsupported", reason="import-require", line=site.line)
        return BindingChange()

    # import_clause: `d`, `* as ns`, `d, { a }`, `d, * as ns`
    parts = _entries(spec.container)
    others = [p for p in parts if not _same(p, spec.entry)]
    if not others:
        return BindingChange(edit=Edit.replace(spec.entry, listing))
    named = next((p for p in others if p.type == "named_imports"), None)
    if named is not None:
        kept = [node_text(e) for e in _entries(named)]
        merged = "{ " + ", ".join([*kept, *(n for n in names if n not in kept)]) + " }"
        return BindingChange(edit=Edit.replace(spec.container, merged))
    if spec.kind is SpecifierKind.NAMESPACE:
        # `d, * as ns` -> `d, { a, b }`
        return BindingChange(edit=Edit.replace(spec.entry, listing))
    log.debug("binding_update_unsupported", reason="default-with-namespace", line=site.line)
    return BindingChange()


def update_binding(
    site: ImportSite,
    old: str,
    new: str | Sequence[str] | None = None,
) -> BindingChange:
    """Rename ``old`` to ``new``, expand it into several names, or remove it.

    Args:
        site: Import site holding the binding.
        old: Local or imported name of the binding to change.
        new: Replacement name, several replacement names inserted at the
             position of ``old``, or None to remove the binding.
    """
    spec = site.find(old)
    if spec is None:
        return BindingChange()

    requested = [new] if isinstance(new, str) else list(new or [])
    present = _siblings(site, spec)
    names = [n for n in dict.fromkeys(requested) if n not in present]
    if not names:
        return remove_binding(site, old)

    if spec.kind.binds_module:
        change = _rename_module_binding(site, spec, names)
    elif spec.container is None:
        # const fips = require("crypto").fips
        if len(names) == 1 and spec.is_aliased:
            pattern = f"{{ {names[0]}: {spec.local} }}"
        else:
            pattern = "{ " + ", ".join(names) + " }"
        change = BindingChange(edit=Edit.replace(site.node, f"{pattern} = {_member_require_value(site)}"))
    elif len(names) == 1:
        # keeps aliases and defaults: { fips: x } -> { getFips: x }
        change = BindingChange(edit=Edit.replace(spec.name_node or spec.entry, names[0]))
    else:
        change = BindingChange(edit=Edit.replace(spec.entry, ", ".join(names)))

    log.debug("binding_updated", old=old, new=names, module=site.module, line=site.line)
    return change
