"""Syntax tree access (tree-sitter)."""

from nodemod.syntax.tree import (
    Node,
    SourceFile,
    TreeSitterParser,
    parse_source,
)

__all__ = [
    "Node",
    "SourceFile",
    "TreeSitterParser",
    "parse_source",
]
