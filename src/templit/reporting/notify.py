from __future__ import annotations

from collections.abc import Callable

from templit.core import ConversionBatch
from templit.reporting.diagnostics import Emitter, literal_diagnostic
from templit.source import Source


def conversion_message(count: int) -> str:
    noun = "string" if count == 1 else "strings"
    return f"Converted {count} {noun} to template literals"


class RichNotifier:
    """
    Prints the conversion count through an Emitter. With `source_of` set, also
    prints one INFO frame per converted literal as it reads after the edit.
    """

    def __init__(
        self,
        emitter: Emitter | None = None,
        source_of: Callable[[], Source] | None = None,
    ):
        self.emitter = emitter or Emitter()
        self.source_of = source_of

    def notify(self, batch: ConversionBatch) -> None:
        if not batch:
            return
        if self.source_of is not None:
            source = self.source_of()
            for lit in batch:
                self.emitter.emit(
                    literal_diagnostic(source, lit, f"converted {lit.quote}-quoted string", code="converted")
                )
        self.emitter.status(conversion_message(len(batch)))


class CollectingNotifier:
    """Keeps messages instead of printing them; used by the wire bridge."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, batch: ConversionBatch) -> None:
        if batch:
            self.messages.append(conversion_message(len(batch)))
