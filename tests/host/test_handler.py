from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from templit.core import ConversionBatch, CursorQuery, LiteralBoundary, QuoteChar
from templit.document import Document, DocumentEditor
from templit.edits import TextEdit
from templit.host import (
    ChangeEvent,
    ConversionHandler,
    EditApplier,
    EditorView,
    OutcomeStatus,
    TextChange,
)
from templit.profile import get_profile
from templit.reporting.warnings_bridge import ConversionWarning

TEXT = "const a = 'hello ${';\nconst b = \"x\";\n"
TYPED = ChangeEvent("doc", (TextChange.insert(0, 18, "{"),))


@dataclass
class RefusingApplier:
    calls: list[Sequence[TextEdit]] = field(default_factory=list)

    def apply(self, edits: Sequence[TextEdit]) -> bool:
        self.calls.append(edits)
        return False


@dataclass
class RecordingNotifier:
    batches: list[ConversionBatch] = field(default_factory=list)

    def notify(self, batch: ConversionBatch) -> None:
        self.batches.append(batch)


def make_editor(*cursors: CursorQuery, document_id: str = "doc") -> DocumentEditor:
    doc = Document.from_string(TEXT, document_id=document_id)
    doc.set_cursors(cursors)
    return DocumentEditor(doc)


def test_collaborators_satisfy_protocols() -> None:
    editor = make_editor()
    assert isinstance(editor, EditorView)
    assert isinstance(editor, EditApplier)
    assert isinstance(RefusingApplier(), EditApplier)


def test_trigger_converts_literal_under_cursor() -> None:
    editor = make_editor(CursorQuery(0, 19))
    notifier = RecordingNotifier()
    handler = ConversionHandler(editor, notifier)

    outcome = handler(TYPED, editor)

    assert outcome.status is OutcomeStatus.APPLIED
    assert outcome.batch == (LiteralBoundary(0, 10, 19, QuoteChar.SINGLE),)
    assert outcome.count == 1
    assert editor.document.text == "const a = `hello ${`;\nconst b = \"x\";\n"
    assert notifier.batches == [outcome.batch]


def test_multiple_cursors_one_edit_batch() -> None:
    editor = make_editor(CursorQuery(0, 19), CursorQuery(1, 11), CursorQuery(0, 12))
    outcome = ConversionHandler(editor).handle(TYPED, editor)
    assert outcome.count == 2
    assert len(outcome.edits) == 4
    assert editor.document.text == "const a = `hello ${`;\nconst b = `x`;\n"


def test_no_active_editor_is_ignored() -> None:
    applier = RefusingApplier()
    outcome = ConversionHandler(applier).handle(TYPED, None)
    assert outcome.status is OutcomeStatus.IGNORED
    assert applier.calls == []


def test_other_document_is_ignored() -> None:
    editor = make_editor(CursorQuery(0, 19), document_id="other")
    outcome = ConversionHandler(editor).handle(TYPED, editor)
    assert outcome.status is OutcomeStatus.IGNORED
    assert editor.document.text == TEXT


def test_non_trigger_change() -> None:
    editor = make_editor(CursorQuery(0, 19))
    event = ChangeEvent("doc", (TextChange.insert(0, 17, "$"),))
    outcome = ConversionHandler(editor).handle(event, editor)
    assert outcome.status is OutcomeStatus.NO_TRIGGER
    assert editor.document.text == TEXT


def test_trigger_without_literal() -> None:
    editor = make_editor(CursorQuery(1, 2))
    notifier = RecordingNotifier()
    outcome = ConversionHandler(editor, notifier).handle(TYPED, editor)
    assert outcome.status is OutcomeStatus.NO_LITERAL
    assert outcome.count == 0
    assert notifier.batches == []


def test_rejected_edit_warns_and_skips_notification() -> None:
    editor = make_editor(CursorQuery(0, 19))
    applier = RefusingApplier()
    notifier = RecordingNotifier()
    handler = ConversionHandler(applier, notifier)

    with pytest.warns(ConversionWarning, match="rejected"):
        outcome = handler.handle(TYPED, editor)

    assert outcome.status is OutcomeStatus.REJECTED
    assert outcome.count == 0
    assert len(applier.calls) == 1
    assert notifier.batches == []


def test_notification_can_be_disabled() -> None:
    editor = make_editor(CursorQuery(0, 19))
    notifier = RecordingNotifier()
    prof = get_profile("javascript").evolve(notify_on_convert=False)
    outcome = ConversionHandler(editor, notifier, prof).handle(TYPED, editor)
    assert outcome.status is OutcomeStatus.APPLIED
    assert notifier.batches == []


def test_run_skips_trigger_check() -> None:
    editor = make_editor(CursorQuery(1, 11))
    outcome = ConversionHandler(editor).run(editor)
    assert outcome.status is OutcomeStatus.APPLIED
    assert editor.document.lines[1] == "const b = `x`;"
