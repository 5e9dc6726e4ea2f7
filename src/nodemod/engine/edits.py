"""Committing edits and removing whole statements.

Rewriting is two-phase:

1. ``commit_edits`` applies byte-range replacements computed against the
   original source.
2. ``remove_lines`` deletes whole statements (by row) from the committed
   text. Deciding whether a statement disappears usually needs every
   specifier-level edit first, hence the separate pass.

``EditScript`` is the accumulator a recipe threads through its own logic and
applies once at the end.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from nodemod.core.logging import get_logger
from nodemod.engine.types import BindingChange, Edit, LineRange
from nodemod.syntax.tree import SourceFile

log = get_logger(__name__)


def commit_edits(source: SourceFile, edits: Iterable[Edit]) -> str:
    """Apply ``edits`` to the original text of ``source``.

    Edits are addressed by original byte offsets and must not overlap.
    Equal start offsets keep their given order, so insertions at the same
    point appear in discovery order. No edits returns the text unchanged.
    """
    ordered = sorted(edits, key=lambda e: e.start_byte)
    if not ordered:
        return source.text

    content = source.content
    chunks: list[bytes] = []
    cursor = 0
    for edit in ordered:
        # overlapping edits are a caller bug; this keeps the output well-formed
        start = max(edit.start_byte, cursor)
        chunks.append(content[cursor:start])
        chunks.append(edit.text.encode("utf-8"))
        cursor = max(edit.end_byte, cursor)
    chunks.append(content[cursor:])

    log.debug("edits_committed", path=str(source.path), count=len(ordered))
    return b"".join(chunks).decode("utf-8")


def remove_lines(text: str, ranges: Iterable[LineRange]) -> str:
    """Delete every row covered by ``ranges``, trailing newlines included."""
    doomed: set[int] = set()
    for rng in ranges:
        doomed.update(range(rng.start_row, rng.end_row + 1))
    if not doomed:
        return text

    lines = text.split("\n")
    kept = [line for row, line in enumerate(lines) if row not in doomed]
    if text.endswith("\n") and (not kept or kept[-1] != ""):
        # the final newline belonged to a deleted last line
        kept.append("")
    return "\n".join(kept)


def _row_shift(content: bytes, edits: list[Edit], before_byte: int) -> int:
    """Net number of newlines added by edits that end before ``before_byte``."""
    shift = 0
    for edit in edits:
        if edit.end_byte <= before_byte:
            removed = content.count(b"\n", edit.start_byte, edit.end_byte)
            shift += edit.text.count("\n") - removed
    return shift


@dataclass
class EditScript:
    """Recipe-owned accumulator of edits and statements to delete."""

    edits: list[Edit] = field(default_factory=list)
    lines_to_remove: list[LineRange] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.edits or self.lines_to_remove)

    def add(self, edit: Edit) -> None:
        if edit not in self.edits:
            self.edits.append(edit)

    def extend(self, edits: Iterable[Edit]) -> None:
        for edit in edits:
            self.add(edit)

    def remove_lines(self, rng: LineRange) -> None:
        if rng not in self.lines_to_remove:
            self.lines_to_remove.append(rng)

    def add_change(self, change: BindingChange) -> None:
        if change.edit is not None:
            self.add(change.edit)
        if change.line_to_remove is not None:
            self.remove_lines(change.line_to_remove)

    def apply(self, source: SourceFile) -> str:
        """Commit the edits, then delete the queued statements.

        Line ranges were recorded against the original rows; each is shifted
        by the lines that earlier edits added or removed.
        """
        text = commit_edits(source, self.edits)
        shifted: list[LineRange] = []
        for rng in self.lines_to_remove:
            delta = _row_shift(source.content, self.edits, rng.start_byte)
            shifted.append(LineRange(start_row=rng.start_row + delta, end_row=rng.end_row + delta))
        return remove_lines(text, shifted)
