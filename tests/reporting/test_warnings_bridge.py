from __future__ import annotations

import warnings

from rich.console import Console

from templit.core import LiteralBoundary, QuoteChar
from templit.reporting.diagnostics import Emitter, Severity, literal_diagnostic
from templit.reporting.warnings_bridge import (
    ConversionWarning,
    DiagnosticWarning,
    TemplitWarning,
    install_warnings_bridge,
)
from templit.source import Source


def _emitter() -> tuple[Emitter, Console]:
    console = Console(record=True, width=100, color_system=None)
    return Emitter(console), console


def test_category_hierarchy() -> None:
    assert issubclass(ConversionWarning, TemplitWarning)
    assert issubclass(DiagnosticWarning, ConversionWarning)


def test_bridge_renders_templit_warnings() -> None:
    em, console = _emitter()
    source = Source(None, "x = 'a';")
    diag = literal_diagnostic(
        source, LiteralBoundary(0, 4, 6, QuoteChar.SINGLE), "stale edit", severity=Severity.WARN
    )

    with warnings.catch_warnings():
        warnings.simplefilter("always")
        uninstall = install_warnings_bridge(emitter=em)
        try:
            warnings.warn("editor said no", ConversionWarning)
            warnings.warn(DiagnosticWarning(diag))
        finally:
            uninstall()

    out = console.export_text()
    assert "ConversionWarning: editor said no" in out
    assert "WARN: stale edit" in out
    assert "x = 'a';" in out


def test_bridge_passes_other_warnings_through() -> None:
    em, console = _emitter()
    seen: list[str] = []

    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.showwarning = lambda message, *args, **kwargs: seen.append(str(message))
        uninstall = install_warnings_bridge(emitter=em)
        try:
            warnings.warn("unrelated", UserWarning)
        finally:
            uninstall()

    assert seen == ["unrelated"]
    assert console.export_text() == ""


def test_bridge_can_take_all_warnings() -> None:
    em, console = _emitter()

    with warnings.catch_warnings():
        warnings.simplefilter("always")
        uninstall = install_warnings_bridge(emitter=em, only_templit=False)
        try:
            warnings.warn("unrelated", UserWarning)
        finally:
            uninstall()

    assert "UserWarning: unrelated" in console.export_text()


def test_uninstall_restores_previous_handler() -> None:
    em, _ = _emitter()
    with warnings.catch_warnings():
        before = warnings.showwarning
        uninstall = install_warnings_bridge(emitter=em)
        assert warnings.showwarning is not before
        uninstall()
        assert warnings.showwarning is before
