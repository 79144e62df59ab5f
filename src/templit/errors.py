"""
templit exceptions: a base TemplitException that wraps a Diagnostic and renders
using the same rich code-frame formatting.
"""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult

from templit.reporting.diagnostics import Diagnostic, render_diagnostic

__all__ = ["TemplitException", "EditConflictError"]


@dataclass(slots=True)
class TemplitException(Exception):
    """
    Base templit exception that carries a Diagnostic and renders nicely with Rich.
    """

    diagnostic: Diagnostic

    # Plain-text fallback (CI/log files; or if user didn't use Console)
    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return self.diagnostic.plain()

    # Pretty rendering when printed via Rich Console
    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        _ = console
        _ = options
        yield render_diagnostic(self.diagnostic)


class EditConflictError(TemplitException):
    """An edit no longer matches the document it was computed against."""
