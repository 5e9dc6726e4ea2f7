"""Usage queries over a parsed file.

Finds where a resolved binding expression is used so recipes can rewrite
it, and whether a binding is still needed after the rewrite.
"""

from __future__ import annotations

from collections.abc import Iterable

from nodemod.engine.types import ImportSite
from nodemod.syntax.tree import Node, SourceFile, ancestors, is_inside, node_text, walk

_SCOPE_KINDS = frozenset({"statement_block", "program"})


def member_chain(node: Node) -> str | None:
    """``a.b.c`` for a plain identifier/member chain, None for anything else."""
    if node.type == "identifier":
        return node_text(node)
    if node.type != "member_expression":
        return None
    obj = node.child_by_field_name("object")
    prop = node.child_by_field_name("property")
    if obj is None or prop is None or prop.type != "property_identifier":
        return None
    if any(c.type == "optional_chain" for c in node.children):
        return None
    base = member_chain(obj)
    return f"{base}.{node_text(prop)}" if base is not None else None


def _excluded(node: Node, spans: list[Node]) -> bool:
    return any(is_inside(node, span) for span in spans)


def find_usages(
    source: SourceFile,
    expression: str,
    exclude: Iterable[ImportSite] = (),
) -> list[Node]:
    """Identifier or member-expression nodes spelling ``expression``.

    A bare name also matches ``{ name }`` shorthand properties of object
    literals, which read the binding without spelling an identifier node.
    Nodes inside the declarations of ``exclude`` (the import sites themselves)
    are skipped, as are property keys and destructuring patterns, which have
    their own node types.
    """
    spans = [site.declaration for site in exclude]
    bare = "." not in expression
    found: list[Node] = []
    for node in walk(source.root):
        if bare and node.type == "shorthand_property_identifier":
            matched = node_text(node) == expression
        elif node.type == ("identifier" if bare else "member_expression"):
            matched = member_chain(node) == expression
        else:
            continue
        if matched and not _excluded(node, spans):
            found.append(node)
    return found


def find_calls(
    source: SourceFile,
    expression: str,
    exclude: Iterable[ImportSite] = (),
) -> list[Node]:
    """Call expressions whose callee is ``expression``."""
    spans = [site.declaration for site in exclude]
    calls: list[Node] = []
    for node in walk(source.root):
        if node.type != "call_expression" or _excluded(node, spans):
            continue
        func = node.child_by_field_name("function")
        if func is not None and member_chain(func) == expression:
            calls.append(node)
    return calls


def call_arguments(call: Node) -> list[Node]:
    """Argument nodes of a call, comments excluded."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [c for c in args.named_children if c.type != "comment"]


def is_binding_used(
    source: SourceFile,
    name: str,
    declaration: Node,
    ignored_properties: Iterable[str] = (),
    *,
    ignore: Iterable[Node] = (),
) -> bool:
    """True if ``name`` is referenced outside ``declaration``.

    ``name.prop`` accesses for any ``prop`` in ``ignored_properties`` do not
    count, which lets a recipe ask "is anything but ``util.log`` left?".
    References inside the ``ignore`` nodes (typically the ones a recipe is
    rewriting) do not count either.
    """
    ignored = set(ignored_properties)
    skipped = [declaration, *ignore]
    for node in walk(source.root):
        if node.type not in ("identifier", "shorthand_property_identifier"):
            continue
        if node_text(node) != name or _excluded(node, skipped):
            continue
        parent = node.parent
        if parent is not None and parent.type == "member_expression":
            obj = parent.child_by_field_name("object")
            prop = parent.child_by_field_name("property")
            if obj is not None and obj.start_byte == node.start_byte and node_text(prop) in ignored:
                continue
        return True
    return False


def get_scope(node: Node, custom_kind: str | None = None) -> Node | None:
    """Nearest enclosing block or program (or ``custom_kind``)."""
    for ancestor in ancestors(node):
        if ancestor.type in _SCOPE_KINDS or ancestor.type == custom_kind:
            return ancestor
    return None


def find_parent_statement(node: Node) -> Node | None:
    """Nearest enclosing expression statement."""
    for ancestor in ancestors(node):
        if ancestor.type == "expression_statement":
            return ancestor
    return None
