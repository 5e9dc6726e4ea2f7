"""LanguagePack registry for the grammars recipes run against.

Every supported language has exactly one LanguagePack holding its grammar
install metadata, the file extensions it claims, and the tree-sitter query
used to find candidate import sites.

The PACKS registry is the canonical lookup: ``PACKS["typescript"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LanguagePack:
    """Tree-sitter configuration for a single language."""

    name: str  # Canonical language name ("javascript", "typescript", "tsx")
    grammar_package: str  # PyPI package ("tree-sitter-typescript")
    grammar_module: str  # Python import ("tree_sitter_typescript")
    # Non-standard function name (e.g. "language_typescript", "language_tsx")
    language_func: str = "language"
    extensions: frozenset[str] = field(default_factory=frozenset)
    # Candidate nodes for import site detection, narrowed in Python
    import_query: str = ""


# Same node shapes for all three grammars
_JS_IMPORT_QUERY = """
    (import_statement) @site
    (variable_declarator) @site
    ((call_expression
        function: (member_expression
            property: (property_identifier) @_then)) @site
     (#eq? @_then "then"))
"""

JAVASCRIPT_PACK = LanguagePack(
    name="javascript",
    grammar_package="tree-sitter-javascript",
    grammar_module="tree_sitter_javascript",
    extensions=frozenset({"js", "jsx", "mjs", "cjs"}),
    import_query=_JS_IMPORT_QUERY,
)

TYPESCRIPT_PACK = LanguagePack(
    name="typescript",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_typescript",
    extensions=frozenset({"ts", "mts", "cts"}),
    import_query=_JS_IMPORT_QUERY,
)

TSX_PACK = LanguagePack(
    name="tsx",
    grammar_package="tree-sitter-typescript",
    grammar_module="tree_sitter_typescript",
    language_func="language_tsx",
    extensions=frozenset({"tsx"}),
    import_query=_JS_IMPORT_QUERY,
)

PACKS: dict[str, LanguagePack] = {
    pack.name: pack for pack in (JAVASCRIPT_PACK, TYPESCRIPT_PACK, TSX_PACK)
}

_EXT_TO_PACK: dict[str, LanguagePack] = {
    ext: pack for pack in PACKS.values() for ext in pack.extensions
}


def get_pack(name: str) -> LanguagePack | None:
    """Look up a pack by canonical language name."""
    return PACKS.get(name)


def get_pack_for_ext(ext: str) -> LanguagePack | None:
    """Look up a pack by file extension (with or without leading dot)."""
    return _EXT_TO_PACK.get(ext.lower().lstrip("."))
