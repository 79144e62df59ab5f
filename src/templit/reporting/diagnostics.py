"""
templit diagnostics: one data model for everything we show the user about a
piece of source text, plus the rich renderer (a framed excerpt with a caret
row) and the Emitter that prints it. Notifications, warnings and exceptions
all go through here.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from templit.core import LiteralBoundary
from templit.source import Source, SourceSpan

__all__ = [
    "Severity",
    "Diagnostic",
    "FrameConfig",
    "Theme",
    "Emitter",
    "render_diagnostic",
    "literal_span",
    "literal_diagnostic",
]


class Severity(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    message: str
    severity: Severity
    span: SourceSpan
    source: Source
    code: str | None = None
    notes: list[str] = field(default_factory=list)
    hint: str | None = None

    def location(self) -> str:
        line, col = self.source.pos_to_line_col(self.span.start)
        return f"{_label(self.source, full=True)}:{line}:{col}"

    def headline(self) -> str:
        code = f" [{self.code}]" if self.code else ""
        return f"{self.severity.upper()}{code}: {self.message}"

    def plain(self) -> str:
        return f"{self.headline()} at {self.location()}"


def literal_span(source: Source, lit: LiteralBoundary) -> SourceSpan:
    """Span covering a literal from its opening through its closing quote."""
    return SourceSpan(source.offset(lit.line, lit.start), source.offset(lit.line, lit.end) + 1)


def literal_diagnostic(
    source: Source,
    lit: LiteralBoundary,
    message: str,
    *,
    severity: Severity = Severity.INFO,
    code: str | None = None,
    hint: str | None = None,
) -> Diagnostic:
    return Diagnostic(message, severity, literal_span(source, lit), source, code=code, hint=hint)


# ─────────────────────────── Styling ───────────────────────────


@dataclass(frozen=True, slots=True)
class FrameConfig:
    context_lines: int = 1
    tab_width: int = 4
    show_line_numbers: bool = True


@dataclass(frozen=True, slots=True)
class Theme:
    info: str = "bold cyan"
    warn: str = "bold yellow"
    error: str = "bold red"
    filename: str = "italic"
    gutter: str = "dim"
    caret: str = "bold green"
    hint_label: str = "italic dim"

    def for_severity(self, severity: Severity) -> str:
        return {Severity.INFO: self.info, Severity.WARN: self.warn, Severity.ERROR: self.error}[
            severity
        ]


def _label(source: Source, *, full: bool = False) -> str:
    if source.file is None:
        return "<string>"
    return str(source.file) if full else source.file.name


# ─────────────────────────── Frame ───────────────────────────


def _caret_row(raw_line: str, start_col: int, end_col: int, indent: int, tab_width: int) -> Text:
    # columns are 0-indexed into raw_line; widths measured after tab expansion
    left = len(raw_line[:start_col].expandtabs(tab_width))
    right = len(raw_line[:end_col].expandtabs(tab_width))
    row = Text(" " * (indent + left))
    row.append("^" * max(1, right - left))
    return row


def _frame_rows(
    source: Source, span: SourceSpan, theme: Theme, cfg: FrameConfig
) -> Iterator[Text]:
    """Context lines around the span's line, with the caret row under it."""
    # `line` here is 0-indexed, matching Source.line_text
    line = source.pos_to_line_col(span.start)[0] - 1
    line_start = source.offset(line, 0)
    raw = source.line_text(line)
    start_col = span.start - line_start
    end_col = min(span.end - line_start, len(raw))

    first = max(0, line - cfg.context_lines)
    last = min(source.line_count - 1, line + cfg.context_lines)
    width = len(str(last + 1))

    for i in range(first, last + 1):
        code = Text(source.line_text(i).expandtabs(cfg.tab_width))
        if cfg.show_line_numbers:
            yield Text.assemble((f"{i + 1:>{width}}", theme.gutter), " | ", code)
        else:
            yield code
        if i == line:
            indent = width + 3 if cfg.show_line_numbers else 0
            row = _caret_row(raw, start_col, end_col, indent, cfg.tab_width)
            row.stylize(theme.caret, indent)
            yield row


def _code_frame(d: Diagnostic, theme: Theme, cfg: FrameConfig) -> Panel:
    line, col = d.source.pos_to_line_col(d.span.start)
    title = Text.assemble((_label(d.source), theme.filename), f":{line}:{col}")
    return Panel.fit(
        Text("\n").join(_frame_rows(d.source, d.span, theme, cfg)),
        title=title,
        border_style=theme.for_severity(d.severity),
        padding=(0, 1),
    )


def render_diagnostic(
    d: Diagnostic,
    *,
    theme: Theme | None = None,
    cfg: FrameConfig | None = None,
) -> RenderableType:
    """Headline, rule, framed excerpt, then any notes and the hint."""
    theme = theme or Theme()
    cfg = cfg or FrameConfig()
    style = theme.for_severity(d.severity)

    head = Text(d.headline())
    head.stylize(style, 0, len(d.severity))

    parts: list[RenderableType] = [head, Rule(style=style), _code_frame(d, theme, cfg)]

    trailer = Text()
    for note in d.notes:
        trailer.append("\n• ")
        trailer.append(note)
    if d.hint:
        trailer.append("\nHint: ", style=theme.hint_label)
        trailer.append(d.hint)
    if trailer.plain:
        parts.append(trailer)

    return Group(*parts)


# ─────────────────────────── Emitter ───────────────────────────


class Emitter:
    """Prints diagnostics and one-line status messages to a rich Console."""

    def __init__(
        self,
        console: Console | None = None,
        theme: Theme | None = None,
        cfg: FrameConfig | None = None,
    ):
        self.console = console or Console(stderr=True)
        self.theme = theme or Theme()
        self.cfg = cfg or FrameConfig()

    def emit(self, d: Diagnostic) -> None:
        self.console.print(render_diagnostic(d, theme=self.theme, cfg=self.cfg))

    def status(self, message: str, severity: Severity = Severity.INFO) -> None:
        self.console.print(Text(message, style=self.theme.for_severity(severity)))

    def info(
        self,
        message: str,
        source: Source,
        span: SourceSpan,
        *,
        code: str | None = None,
        hint: str | None = None,
        notes: Iterable[str] = (),
    ) -> None:
        self.emit(
            Diagnostic(
                message,
                Severity.INFO,
                span,
                source,
                code=code,
                hint=hint,
                notes=list(notes),
            )
        )
