"""Value types shared by the binding engine.

All of these are created fresh for one transform invocation and dropped when
it returns. Byte offsets and rows refer to the original source of the
``SourceFile`` the values were computed from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Literal

from nodemod.core.errors import RecipeError

if TYPE_CHECKING:
    from nodemod.syntax.tree import Node

ImportForm = Literal["require_call", "static_import", "dynamic_import"]

PLACEHOLDER = "$"
NODE_PREFIX = "node:"


def normalize_module(specifier: str) -> str:
    """Strip the ``node:`` scheme so ``node:fs`` and ``fs`` compare equal."""
    return specifier[len(NODE_PREFIX) :] if specifier.startswith(NODE_PREFIX) else specifier


class SpecifierKind(str, Enum):
    DEFAULT = "default"
    NAMESPACE = "namespace"
    NAMED = "named"
    DESTRUCTURED_SHORTHAND = "destructured-shorthand"
    DESTRUCTURED_ALIASED = "destructured-aliased"

    @property
    def binds_module(self) -> bool:
        """True when the local name refers to the whole module object."""
        return self in (SpecifierKind.DEFAULT, SpecifierKind.NAMESPACE)


@dataclass(frozen=True, eq=False)
class Specifier:
    """One binding introduced by an import site.

    ``entry`` is the syntax node listed in ``container`` (an import_specifier,
    a destructuring entry, the default identifier...); ``name_node`` is the
    node holding the imported name and ``local_node`` the bound identifier.
    """

    imported: str | None
    local: str
    kind: SpecifierKind
    entry: Node = field(repr=False)
    container: Node | None = field(default=None, repr=False)
    name_node: Node | None = field(default=None, repr=False)
    local_node: Node | None = field(default=None, repr=False)

    @property
    def is_aliased(self) -> bool:
        return self.imported is not None and self.imported.split(".")[-1] != self.local

    @property
    def imported_segments(self) -> tuple[str, ...]:
        return tuple(self.imported.split(".")) if self.imported else ()


@dataclass(frozen=True, eq=False)
class ImportSite:
    """One statement bringing a module into scope."""

    form: ImportForm
    source: str  # specifier text as written, e.g. "node:crypto"
    node: Node = field(repr=False)  # declarator, import_statement or .then() call
    statement: Node = field(repr=False)  # enclosing top-level statement
    # declarator name, import_clause or callback parameter (None for bare imports)
    binding: Node | None = field(default=None, repr=False)
    specifiers: tuple[Specifier, ...] = ()
    # Set for `require("m").a.b` and `import("m").then(cb)` shapes
    member_path: tuple[str, ...] = ()
    is_promise: bool = False

    @property
    def module(self) -> str:
        return normalize_module(self.source)

    @property
    def declaration(self) -> Node:
        """Span holding the bindings: the callback parameter of a promise form, else the statement."""
        if self.is_promise and self.binding is not None:
            return self.binding
        return self.statement

    @property
    def line(self) -> int:
        """1-based line of the statement, for logging."""
        return self.statement.start_point[0] + 1

    def find(self, name: str) -> Specifier | None:
        """Specifier whose local name, else whose imported name, is ``name``."""
        for spec in self.specifiers:
            if spec.local == name:
                return spec
        for spec in self.specifiers:
            if spec.imported == name:
                return spec
        return None


@dataclass(frozen=True)
class BindingPath:
    """Dotted capability path whose first segment is the ``$`` placeholder."""

    segments: tuple[str, ...]

    @classmethod
    def parse(cls, path: str) -> BindingPath:
        parts = tuple(path.split("."))
        if parts[0] != PLACEHOLDER:
            raise RecipeError.invalid_binding_path(path, f"must start with '{PLACEHOLDER}'")
        if any(not p for p in parts[1:]) or PLACEHOLDER in parts[1:]:
            raise RecipeError.invalid_binding_path(path, "empty or repeated placeholder segment")
        return cls(segments=parts[1:])

    @property
    def depth(self) -> int:
        return len(self.segments) + 1

    def __str__(self) -> str:
        return ".".join((PLACEHOLDER, *self.segments))


@dataclass(frozen=True)
class ResolvedBinding:
    """How a capability is spelled in this file."""

    expression: str  # "isFips", "crypto.fips", "types.isNativeError"
    depth: int  # path segments consumed by the local root, placeholder included
    site: ImportSite = field(repr=False, compare=False)
    specifier: Specifier = field(repr=False, compare=False)

    @property
    def is_bare(self) -> bool:
        return "." not in self.expression

    @property
    def root(self) -> str:
        return self.expression.split(".", 1)[0]

    @property
    def base(self) -> str:
        """Expression without its last member ('' for a bare identifier)."""
        return self.expression.rpartition(".")[0]

    @property
    def member(self) -> str:
        """Last segment of the expression."""
        return self.expression.rpartition(".")[2]


@dataclass(frozen=True)
class Edit:
    """Replace bytes ``[start_byte, end_byte)`` of the original source with ``text``."""

    start_byte: int
    end_byte: int
    text: str

    @classmethod
    def replace(cls, node: Node, text: str) -> Edit:
        return cls(node.start_byte, node.end_byte, text)

    @classmethod
    def delete(cls, start_byte: int, end_byte: int) -> Edit:
        return cls(start_byte, end_byte, "")


@dataclass(frozen=True)
class LineRange:
    """Whole statement queued for deletion after edits are committed.

    Rows are 0-based and inclusive.
    """

    start_row: int
    end_row: int
    start_byte: int = 0
    end_byte: int = 0

    @classmethod
    def of(cls, node: Node) -> LineRange:
        return cls(
            start_row=node.start_point[0],
            end_row=node.end_point[0],
            start_byte=node.start_byte,
            end_byte=node.end_byte,
        )


@dataclass(frozen=True)
class BindingChange:
    """Outcome of removing or renaming one specifier.

    At most one of ``edit`` and ``line_to_remove`` is set; neither is set when
    the name is not bound by the site.
    """

    edit: Edit | None = None
    line_to_remove: LineRange | None = None

    def __bool__(self) -> bool:
        return self.edit is not None or self.line_to_remove is not None
