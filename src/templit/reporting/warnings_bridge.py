"""
templit warning categories, and an opt-in hook that shows them through the
rich Emitter instead of Python's one-line default. Filtering still works as
usual; only the display changes.

Nothing installs the hook on import. The CLI turns it on around a conversion.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from rich.console import Console

from templit.reporting.diagnostics import Diagnostic, Emitter

__all__ = [
    "TemplitWarning",
    "ConversionWarning",
    "DiagnosticWarning",
    "install_warnings_bridge",
]


class TemplitWarning(Warning):
    """Base templit warning category."""


class ConversionWarning(TemplitWarning):
    """A located conversion could not be applied to the document."""


@dataclass(slots=True)
class DiagnosticWarning(ConversionWarning):
    """ConversionWarning that points at source text; prints as a frame once bridged."""

    diagnostic: Diagnostic

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return self.diagnostic.plain()


def install_warnings_bridge(
    *,
    emitter: Emitter | None = None,
    only_templit: bool = True,
) -> Callable[[], None]:
    """
    Replace `warnings.showwarning` and return a function that puts the old one back.

    templit categories always go to `emitter` (stderr by default). Other
    warnings keep their previous display unless `only_templit` is False.
    """
    em = emitter or Emitter(Console(stderr=True))
    previous = warnings.showwarning

    def show(
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        if isinstance(message, DiagnosticWarning):
            em.emit(message.diagnostic)
        elif issubclass(category, TemplitWarning):
            em.status(f"{category.__name__}: {message}")
        elif only_templit:
            previous(message, category, filename, lineno, file=file, line=line)
        else:
            em.status(f"{category.__name__}: {message} ({filename}:{lineno})")

    warnings.showwarning = show

    def uninstall() -> None:
        warnings.showwarning = previous

    return uninstall
