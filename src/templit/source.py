from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path


@dataclass(frozen=True, order=True, slots=True)
class SourceSpan:
    '''Half-open [start, end) range of offsets into a Source's text.'''
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"SourceSpan.start cannot be negative (got {self.start})")
        if self.end <= self.start:
            raise ValueError(f"SourceSpan is empty or inverted ({self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


_LINE_END = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """
    Like `str.splitlines(keepends=True)`, but only LF, CRLF and a lone CR end
    a line. Form feeds and U+2028/U+2029 stay inside the line, as editors show them.
    """
    pieces: list[str] = []
    pos = 0
    for m in _LINE_END.finditer(text):
        pieces.append(text[pos:m.end()])
        pos = m.end()
    if pos < len(text):
        pieces.append(text[pos:])
    return pieces


def _line_offsets(text: str) -> tuple[int, ...]:
    # Offset of every line start plus a final sentinel at len(text)
    offsets = [0]
    for chunk in split_lines(text):
        offsets.append(offsets[-1] + len(chunk))
    return tuple(offsets)


@dataclass(frozen=True, slots=True)
class Source:
    """Text of one file (or string) with 0-indexed line/column addressing."""

    file: Path | None
    contents: str

    _offsets: tuple[int, ...] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.contents:
            where = f": {self.file}" if self.file is not None else ""
            raise ValueError(f"Source text is empty{where}")

    @classmethod
    def from_file(cls, path_rep: str | Path | PathLike[str], encoding: str = "utf-8") -> Source:
        path = Path(path_rep)
        if path.is_dir():
            raise IsADirectoryError(f"Expected a file but found a directory: {path}")
        if not path.exists():
            raise FileNotFoundError(f"No such file: {path}")
        # newline="" keeps CRLF and CR as they are on disk
        with open(path, encoding=encoding, newline="") as f:
            return cls(path, f.read())

    @classmethod
    def from_lines(cls, lines: list[str], file: Path | None = None) -> Source:
        return cls(file, "\n".join(lines))

    def full_span(self) -> SourceSpan:
        return SourceSpan(0, len(self.contents))

    def slice(self, span: SourceSpan) -> str:
        if span.end > len(self.contents):
            raise ValueError(f"{span} runs past the end of the source ({len(self.contents)})")
        return self.contents[span.start:span.end]

    @property
    def line_starts(self) -> tuple[int, ...]:
        if self._offsets is None:
            object.__setattr__(self, "_offsets", _line_offsets(self.contents))
        return self._offsets

    @property
    def line_count(self) -> int:
        # a trailing terminator opens one more, empty, line
        n = len(self.line_starts) - 1
        return n + 1 if self.contents.endswith(("\n", "\r")) else n

    def line_text(self, line: int) -> str:
        '''0-indexed line, without its terminator.'''
        if not (0 <= line < self.line_count):
            raise ValueError(f"line {line} out of range [0, {self.line_count})")
        starts = self.line_starts
        if line + 1 == len(starts):
            return ""
        return self.contents[starts[line]:starts[line + 1]].rstrip("\r\n")

    def offset(self, line: int, column: int) -> int:
        '''0-indexed (line, column) to an offset into `contents`.'''
        text = self.line_text(line)
        if not (0 <= column <= len(text)):
            raise ValueError(f"column {column} out of range [0, {len(text)}] on line {line}")
        starts = self.line_starts
        return (starts[line] if line < len(starts) else len(self.contents)) + column

    def pos_to_line_col(self, pos: int) -> tuple[int, int]:
        '''1-indexed (line, col) for display; pos == len(contents) is allowed.'''
        if not (0 <= pos <= len(self.contents)):
            raise ValueError(f"pos {pos} out of range [0, {len(self.contents)}]")
        idx = bisect.bisect_right(self.line_starts, pos) - 1
        return idx + 1, pos - self.line_starts[idx] + 1
