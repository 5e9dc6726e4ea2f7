"""Tree-sitter access for one source file.

This is the only module that talks to tree-sitter directly. It provides:
- ``SourceFile``: immutable parsed tree + original text + filename
- ``parse_source``: language detection by extension and parsing
- Node helpers (text, traversal, string literal values, queries)

Byte offsets and (row, column) points returned by tree-sitter index the
UTF-8 encoded source; ``SourceFile.content`` holds exactly those bytes.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter
from tree_sitter import Query as _TSQuery
from tree_sitter import QueryCursor as _TSQueryCursor

from nodemod.core.errors import ParseError
from nodemod.syntax.packs import LanguagePack, get_pack, get_pack_for_ext

Node = tree_sitter.Node


@dataclass(frozen=True)
class SourceFile:
    """A parsed source file. Never mutated; recipes only read from it."""

    path: Path
    text: str
    content: bytes = field(repr=False)
    tree: Any = field(repr=False)  # tree-sitter Tree
    language: str = "javascript"

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return bool(self.tree.root_node.has_error)


@dataclass
class TreeSitterParser:
    """Caches one tree-sitter Parser per language.

    Usage::

        parser = TreeSitterParser()
        source = parser.parse("const fs = require('fs');", Path("a.js"))
    """

    _languages: dict[str, Any] = field(default_factory=dict, repr=False)
    _parsers: dict[str, Any] = field(default_factory=dict, repr=False)
    _queries: dict[tuple[str, str], Any] = field(default_factory=dict, repr=False)

    def get_language(self, pack: LanguagePack) -> Any:
        """Get or load the tree-sitter Language for a pack."""
        if pack.name in self._languages:
            return self._languages[pack.name]
        try:
            mod = importlib.import_module(pack.grammar_module)
            lang_fn = getattr(mod, pack.language_func)
        except (ImportError, AttributeError) as err:
            raise ParseError.unsupported_language(pack.name) from err
        lang = tree_sitter.Language(lang_fn())
        self._languages[pack.name] = lang
        return lang

    def get_query(self, pack: LanguagePack, query_text: str) -> Any:
        """Compile (once) a query for a pack's language."""
        key = (pack.name, query_text)
        if key not in self._queries:
            self._queries[key] = _TSQuery(self.get_language(pack), query_text)
        return self._queries[key]

    def parse(self, text: str, path: Path, language: str | None = None) -> SourceFile:
        """Parse ``text`` with the grammar selected by ``language`` or the path suffix.

        Raises:
            ParseError: No grammar handles this file type.
        """
        pack = get_pack(language) if language else get_pack_for_ext(path.suffix)
        if pack is None:
            raise ParseError.unsupported_language(str(path))

        parser = self._parsers.get(pack.name)
        if parser is None:
            parser = tree_sitter.Parser(self.get_language(pack))
            self._parsers[pack.name] = parser

        content = text.encode("utf-8")
        tree = parser.parse(content)
        return SourceFile(path=path, text=text, content=content, tree=tree, language=pack.name)


_default_parser = TreeSitterParser()


def parse_source(
    text: str,
    filename: str | Path = "input.js",
    *,
    language: str | None = None,
) -> SourceFile:
    """Parse source text using the shared parser."""
    return _default_parser.parse(text, Path(filename), language)


def query_captures(source: SourceFile, query_text: str, node: Node | None = None) -> dict[str, list[Node]]:
    """Run a tree-sitter query and return its captures by name."""
    pack = get_pack(source.language)
    if pack is None:
        raise ParseError.unsupported_language(str(source.path))
    query = _default_parser.get_query(pack, query_text)
    cursor = _TSQueryCursor(query)
    captures: dict[str, list[Node]] = cursor.captures(node or source.root)
    return captures


# =========================================================================
# Node helpers
# =========================================================================


def node_text(node: Node | None) -> str:
    """Decoded text of a node ('' for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal of ``node`` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_all(node: Node, *kinds: str) -> list[Node]:
    """All descendants (including ``node``) whose type is one of ``kinds``."""
    wanted = set(kinds)
    return [n for n in walk(node) if n.type in wanted]


def ancestors(node: Node) -> Iterator[Node]:
    parent = node.parent
    while parent is not None:
        yield parent
        parent = parent.parent


def is_inside(node: Node, container: Node) -> bool:
    """True if ``node`` lies within the byte span of ``container``."""
    return container.start_byte <= node.start_byte and node.end_byte <= container.end_byte


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def string_value(node: Node | None) -> str | None:
    """Value of a plain string literal node, without quotes.

    Template strings and anything that is not a ``string`` node yield None.
    """
    if node is None or node.type != "string":
        return None
    return "".join(node_text(c) for c in node.named_children)
