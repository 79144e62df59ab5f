from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from templit.core import ConversionBatch, QuoteChar


@dataclass(frozen=True, slots=True)
class TextEdit:
    """
    Replace the single character at (line, column) with `text`.

    `expected` is the character the edit was computed against; appliers use it
    to refuse edits against a document that changed underneath them.
    """

    line: int
    column: int
    text: str
    expected: str | None = None

    def __post_init__(self) -> None:
        if self.line < 0 or self.column < 0:
            raise ValueError(f"TextEdit position cannot be negative (got {self.line}:{self.column})")


def edits_for_batch(batch: ConversionBatch, delimiter: QuoteChar | str) -> tuple[TextEdit, ...]:
    """Opening then closing replacement for every literal, in batch order."""
    out: list[TextEdit] = []
    for lit in batch:
        out.append(TextEdit(lit.line, lit.start, str(delimiter), expected=str(lit.quote)))
        out.append(TextEdit(lit.line, lit.end, str(delimiter), expected=str(lit.quote)))
    return tuple(out)


def apply_to_line(line_text: str, edits: Iterable[TextEdit]) -> str:
    """
    Apply single-character replacements to one line. Overlapping edits keep the
    first one (by column) and drop the rest.
    """
    chars = list(line_text)
    last = -1
    for e in sorted(edits, key=lambda e: e.column):
        if e.column <= last:
            continue
        chars[e.column:e.column + 1] = [e.text]
        last = e.column
    return "".join(chars)


def group_by_line(edits: Sequence[TextEdit]) -> dict[int, list[TextEdit]]:
    grouped: dict[int, list[TextEdit]] = {}
    for e in edits:
        grouped.setdefault(e.line, []).append(e)
    return grouped
