from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias


class QuoteChar(StrEnum):
    DOUBLE = '"'
    SINGLE = "'"
    BACKTICK = "`"


DEFAULT_QUOTES: tuple[QuoteChar, ...] = (QuoteChar.DOUBLE, QuoteChar.SINGLE)

ESCAPE_CHAR = "\\"


@dataclass(frozen=True, slots=True)
class CursorQuery:
    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 0:
            raise ValueError(f"CursorQuery.line cannot be negative (got {self.line})")
        if self.column < 0:
            raise ValueError(f"CursorQuery.column cannot be negative (got {self.column})")


@dataclass(frozen=True, slots=True)
class LiteralBoundary:
    """
    Opening and closing delimiter columns of one string literal on one line.
    Both columns point AT the quote characters, so the literal's text is
    `line_text[start:end + 1]`.
    """

    line: int
    start: int
    end: int
    quote: QuoteChar

    def __post_init__(self) -> None:
        if self.line < 0:
            raise ValueError(f"LiteralBoundary.line cannot be negative (got {self.line})")
        if self.start < 0:
            raise ValueError(f"LiteralBoundary.start cannot be negative (got {self.start})")
        if self.end <= self.start:
            raise ValueError(f"LiteralBoundary.end ({self.end}) <= start ({self.start})")
        # accept plain one-char strings from callers and wire decoding
        object.__setattr__(self, "quote", QuoteChar(self.quote))

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.line, self.start, self.end)

    def interior(self, line_text: str) -> str:
        return line_text[self.start + 1:self.end]


ConversionBatch: TypeAlias = tuple[LiteralBoundary, ...]

LineTextOf: TypeAlias = Callable[[int], str]
