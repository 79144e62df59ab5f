"""
In-memory text document used as the reference host: it supplies line text and
cursors to the converter and applies the resulting edits all-or-nothing.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from templit.core import CursorQuery
from templit.edits import TextEdit, apply_to_line, group_by_line
from templit.errors import EditConflictError, TemplitException
from templit.reporting.diagnostics import Diagnostic, Severity
from templit.reporting.warnings_bridge import DiagnosticWarning
from templit.source import Source, SourceSpan, split_lines


@dataclass(slots=True)
class Document:
    document_id: str
    lines: list[str]
    file: Path | None = None
    cursors: list[CursorQuery] = field(default_factory=list)
    # terminator after each line ("\n", "\r\n", "\r", or "" for the last one);
    # lines past the end of this list are joined with "\n"
    endings: list[str] = field(default_factory=list)

    @classmethod
    def from_string(
        cls, text: str, document_id: str = "untitled", file: Path | None = None
    ) -> Document:
        lines: list[str] = []
        endings: list[str] = []
        for piece in split_lines(text):
            body = piece.rstrip("\r\n")
            lines.append(body)
            endings.append(piece[len(body):])
        # text ending in a terminator (or empty text) has a final empty line
        if not endings or endings[-1]:
            lines.append("")
            endings.append("")
        return cls(document_id=document_id, lines=lines, file=file, endings=endings)

    @classmethod
    def from_file(cls, path_rep: str | Path | PathLike[str], encoding: str = "utf-8") -> Document:
        path = Path(path_rep)
        source = Source.from_file(path, encoding=encoding)
        return cls.from_string(source.contents, document_id=str(path), file=path)

    @property
    def text(self) -> str:
        last = len(self.lines) - 1
        return "".join(
            line + (self.endings[i] if i < len(self.endings) else ("\n" if i < last else ""))
            for i, line in enumerate(self.lines)
        )

    def source(self) -> Source:
        return Source(self.file, self.text)

    def line_text(self, line: int) -> str:
        if not (0 <= line < len(self.lines)):
            raise ValueError(f"line {line} out of range [0, {len(self.lines)})")
        return self.lines[line]

    def set_cursors(self, cursors: Iterable[CursorQuery]) -> None:
        self.cursors = list(cursors)

    def _conflict(self, edit: TextEdit, message: str) -> EditConflictError:
        # point at the nearest character that exists
        source = Source(self.file, self.text or "\n")
        line = min(edit.line, source.line_count - 1)
        start = source.offset(line, min(edit.column, len(source.line_text(line))))
        start = min(start, len(source.contents) - 1)
        return EditConflictError(
            Diagnostic(
                message=message,
                severity=Severity.ERROR,
                span=SourceSpan(start, start + 1),
                source=source,
                code="edit-conflict",
            )
        )

    def _check(self, edit: TextEdit) -> None:
        if edit.line >= len(self.lines):
            raise self._conflict(edit, f"edit targets line {edit.line}, document has {len(self.lines)}")
        text = self.lines[edit.line]
        if edit.column >= len(text):
            raise self._conflict(
                edit, f"edit targets column {edit.column}, line {edit.line} has {len(text)}"
            )
        if edit.expected is not None and text[edit.column] != edit.expected:
            raise self._conflict(
                edit,
                f"expected {edit.expected!r} at {edit.line}:{edit.column}, found {text[edit.column]!r}",
            )

    def apply_edits(self, edits: Sequence[TextEdit]) -> None:
        """Validate every edit first, then apply them all. Raises EditConflictError."""
        targeted: set[tuple[int, int]] = set()
        for e in edits:
            self._check(e)
            if (e.line, e.column) in targeted:
                raise self._conflict(e, f"two edits target {e.line}:{e.column}")
            targeted.add((e.line, e.column))
        for line, line_edits in group_by_line(edits).items():
            self.lines[line] = apply_to_line(self.lines[line], line_edits)

    def write(self, path: Path | None = None, encoding: str = "utf-8") -> Path:
        target = path or self.file
        if target is None:
            raise ValueError("Document has no file; pass a path to write to.")
        target.write_text(self.text, encoding=encoding, newline="")
        return target


@dataclass(slots=True)
class DocumentEditor:
    """
    Adapts a Document to the host-side interfaces the conversion handler needs:
    a view of the active editor and an edit applier.
    """

    document: Document

    @property
    def document_id(self) -> str:
        return self.document.document_id

    def line_text(self, line: int) -> str:
        return self.document.line_text(line)

    def cursors(self) -> Sequence[CursorQuery]:
        return tuple(self.document.cursors)

    def apply(self, edits: Sequence[TextEdit]) -> bool:
        try:
            self.document.apply_edits(edits)
        except TemplitException as e:
            warnings.warn(DiagnosticWarning(e.diagnostic), stacklevel=2)
            return False
        return True
