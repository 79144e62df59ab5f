"""
templit.host.handler
====================

Host-side entry point: an editor pushes a ChangeEvent in, the handler decides
whether the trigger was typed, computes the conversion batch, and hands the
edits to an injected applier. Nothing here talks to a real editor.
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol, runtime_checkable

from templit.convert import convert
from templit.core import ConversionBatch, CursorQuery
from templit.edits import TextEdit, edits_for_batch
from templit.host.events import ChangeEvent
from templit.host.trigger import first_trigger
from templit.profile import Profile, default_profile
from templit.reporting.warnings_bridge import ConversionWarning

# -----------------------------------------------------------------------------
# Collaborator protocols (implemented by the host)
# -----------------------------------------------------------------------------


@runtime_checkable
class EditorView(Protocol):
    """Read-only view of the active editor."""

    @property
    def document_id(self) -> str: ...

    def line_text(self, line: int) -> str: ...

    def cursors(self) -> Sequence[CursorQuery]: ...


@runtime_checkable
class EditApplier(Protocol):
    def apply(self, edits: Sequence[TextEdit]) -> bool:
        """Apply all edits as one operation; False if the host refused them."""
        ...


@runtime_checkable
class Notifier(Protocol):
    def notify(self, batch: ConversionBatch) -> None: ...


class NullNotifier:
    def notify(self, batch: ConversionBatch) -> None:
        _ = batch


# -----------------------------------------------------------------------------
# Outcome
# -----------------------------------------------------------------------------


class OutcomeStatus(StrEnum):
    IGNORED = "ignored"          # no active editor, or another document
    NO_TRIGGER = "no_trigger"    # event did not type the trigger
    NO_LITERAL = "no_literal"    # trigger typed, but no cursor in a convertible literal
    APPLIED = "applied"
    REJECTED = "rejected"        # applier refused the edits


@dataclass(frozen=True, slots=True)
class ConversionOutcome:
    status: OutcomeStatus
    batch: ConversionBatch = ()
    edits: tuple[TextEdit, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.batch) if self.status is OutcomeStatus.APPLIED else 0


# -----------------------------------------------------------------------------
# Handler
# -----------------------------------------------------------------------------


class ConversionHandler:
    def __init__(
        self,
        applier: EditApplier,
        notifier: Notifier | None = None,
        profile: Profile | None = None,
    ):
        self.applier = applier
        self.notifier = notifier or NullNotifier()
        self.profile = profile or default_profile()

    def __call__(self, event: ChangeEvent, editor: EditorView | None) -> ConversionOutcome:
        return self.handle(event, editor)

    def handle(self, event: ChangeEvent, editor: EditorView | None) -> ConversionOutcome:
        if editor is None or editor.document_id != event.document_id:
            return ConversionOutcome(OutcomeStatus.IGNORED)

        # One conversion per event, however many changes typed the trigger.
        if first_trigger(event.changes, editor.line_text, self.profile) is None:
            return ConversionOutcome(OutcomeStatus.NO_TRIGGER)

        return self.run(editor)

    def run(self, editor: EditorView) -> ConversionOutcome:
        """Convert around the editor's cursors without checking for a trigger."""
        batch = convert(editor.cursors(), editor.line_text, profile=self.profile)
        if not batch:
            return ConversionOutcome(OutcomeStatus.NO_LITERAL)

        edits = edits_for_batch(batch, self.profile.target_delimiter)
        if not self.applier.apply(edits):
            warnings.warn(
                f"Could not convert {len(batch)} string(s) in {editor.document_id}; "
                "the editor rejected the edit.",
                ConversionWarning,
                stacklevel=2,
            )
            return ConversionOutcome(OutcomeStatus.REJECTED, batch, edits)

        if self.profile.notify_on_convert:
            self.notifier.notify(batch)
        return ConversionOutcome(OutcomeStatus.APPLIED, batch, edits)
