"""Recipe type and helpers shared by the recipes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from nodemod.engine.bindings import remove_site_bindings
from nodemod.engine.edits import EditScript
from nodemod.engine.locator import get_module_dependencies
from nodemod.engine.resolver import resolve_all
from nodemod.engine.types import Edit, ImportSite, ResolvedBinding
from nodemod.engine.usage import is_binding_used
from nodemod.syntax.tree import Node, SourceFile, is_inside, node_text

Transform = Callable[[SourceFile], str | None]


@dataclass(frozen=True)
class Recipe:
    """A named codemod.

    ``transform`` returns the rewritten text, or None when the file does not
    need changes.
    """

    name: str
    description: str
    transform: Transform
    modules: tuple[str, ...] = ()

    def __call__(self, source: SourceFile) -> str | None:
        return self.transform(source)


def bindings_for(source: SourceFile, module: str, path: str) -> list[tuple[ImportSite, ResolvedBinding]]:
    """Every import site of ``module`` paired with each spelling of ``path`` it provides."""
    return [
        (site, resolved)
        for site in get_module_dependencies(source, module)
        for resolved in resolve_all(site, path)
    ]


def splice(source: SourceFile, node: Node, replacements: Iterable[tuple[Node, str]]) -> str:
    """Text of ``node`` with the given (non-overlapping) inner nodes replaced."""
    content = source.content
    chunks: list[bytes] = []
    cursor = node.start_byte
    for inner, text in sorted(replacements, key=lambda r: r[0].start_byte):
        chunks.append(content[cursor : inner.start_byte])
        chunks.append(text.encode("utf-8"))
        cursor = inner.end_byte
    chunks.append(content[cursor : node.end_byte])
    return b"".join(chunks).decode("utf-8")


def outermost(nodes: list[Node]) -> list[Node]:
    """Nodes not strictly contained in another node of the list."""
    return [
        node
        for node in nodes
        if not any(
            other is not node
            and is_inside(node, other)
            and (other.start_byte, other.end_byte) != (node.start_byte, node.end_byte)
            for other in nodes
        )
    ]


def prune(
    source: SourceFile,
    script: EditScript,
    roots: dict[ImportSite, list[str]],
    rewritten: dict[ImportSite, list[Node]],
) -> None:
    """Queue removal of the ``roots`` of each site that nothing but its ``rewritten`` nodes use.

    A site is left alone unless something was rewritten through it, so a
    file that only imports the module keeps its import. All sites are
    removed in one step since several of them may share a declaration.
    """
    removals: dict[ImportSite, list[str]] = {}
    for site, names in roots.items():
        nodes = rewritten.get(site, [])
        if not nodes:
            continue
        removals[site] = [
            root
            for root in dict.fromkeys(names)
            if not is_binding_used(source, root, site.declaration, ignore=nodes)
        ]
    for change in remove_site_bindings(removals):
        script.add_change(change)


def replace_use(node: Node, text: str) -> Edit:
    """Replace a usage node, expanding ``{ name }`` shorthand to ``{ name: text }``."""
    return Edit.replace(node, use_text(node, text))


def use_text(node: Node, text: str) -> str:
    if node.type == "shorthand_property_identifier":
        return f"{node_text(node)}: {text}"
    return text


def finish(source: SourceFile, script: EditScript) -> str | None:
    """Apply ``script``; None when nothing changed."""
    if not script:
        return None
    text = script.apply(source)
    return None if text == source.text else text
