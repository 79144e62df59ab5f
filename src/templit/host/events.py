from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True, slots=True)
class Position:
    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 0 or self.column < 0:
            raise ValueError(f"Position cannot be negative (got {self.line}:{self.column})")


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range.end {self.end} precedes start {self.start}")

    @classmethod
    def caret(cls, line: int, column: int) -> Range:
        p = Position(line, column)
        return cls(p, p)


@dataclass(frozen=True, slots=True)
class TextChange:
    """`range` is the replaced region before the change; `text` what was inserted."""
    range: Range
    text: str

    @classmethod
    def insert(cls, line: int, column: int, text: str) -> TextChange:
        return cls(Range.caret(line, column), text)


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    document_id: str
    changes: tuple[TextChange, ...] = field(default_factory=tuple)
