from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TypeAlias

from templit.host.events import ChangeEvent
from templit.host.handler import ConversionHandler, ConversionOutcome, EditorView

Listener: TypeAlias = Callable[[ChangeEvent], object]
ActiveEditor: TypeAlias = Callable[[], EditorView | None]


class EventSource(Protocol):
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Start delivering events to `listener`; returns its unsubscribe function."""
        ...


class ChangeFeed:
    """
    Minimal in-process EventSource. Listeners run synchronously, in
    subscription order, each to completion before the next event.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def __len__(self) -> int:
        return len(self._listeners)


@dataclass(slots=True)
class Registration:
    """Handle for one subscribed handler. `release()` is safe to call twice."""

    _unsubscribe: Callable[[], None] | None
    outcomes: list[ConversionOutcome] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def release(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def __enter__(self) -> Registration:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()


def register(
    source: EventSource,
    handler: ConversionHandler,
    active_editor: ActiveEditor,
    *,
    keep_outcomes: bool = False,
) -> Registration:
    """
    Subscribe `handler` to `source`. Each event is paired with whatever editor
    `active_editor()` reports at delivery time.
    """
    reg = Registration(None)

    def _on_change(event: ChangeEvent) -> ConversionOutcome:
        outcome = handler.handle(event, active_editor())
        if keep_outcomes:
            reg.outcomes.append(outcome)
        return outcome

    reg._unsubscribe = source.subscribe(_on_change)
    return reg
