"""
templit.host
============

Unified import surface for the editor-integration layer. The core
(locate/dedupe/convert) never imports from here.
"""

from __future__ import annotations

from templit.host.events import ChangeEvent, Position, Range, TextChange
from templit.host.handler import (
    ConversionHandler,
    ConversionOutcome,
    EditApplier,
    EditorView,
    Notifier,
    NullNotifier,
    OutcomeStatus,
)
from templit.host.registration import ChangeFeed, EventSource, Registration, register
from templit.host.trigger import first_trigger, is_trigger

__all__ = [
    "ChangeEvent",
    "Position",
    "Range",
    "TextChange",
    "ConversionHandler",
    "ConversionOutcome",
    "EditApplier",
    "EditorView",
    "Notifier",
    "NullNotifier",
    "OutcomeStatus",
    "ChangeFeed",
    "EventSource",
    "Registration",
    "register",
    "first_trigger",
    "is_trigger",
]
