from __future__ import annotations

from templit.core import CursorQuery
from templit.document import Document, DocumentEditor
from templit.host import (
    ChangeEvent,
    ChangeFeed,
    ConversionHandler,
    OutcomeStatus,
    TextChange,
    register,
)

TYPED = ChangeEvent("doc", (TextChange.insert(0, 8, "{"),))


def make_editor() -> DocumentEditor:
    doc = Document.from_string("x = 'a ${';", document_id="doc")
    doc.set_cursors([CursorQuery(0, 6)])
    return DocumentEditor(doc)


def test_feed_delivers_to_handler() -> None:
    feed = ChangeFeed()
    editor = make_editor()
    reg = register(feed, ConversionHandler(editor), lambda: editor, keep_outcomes=True)

    assert len(feed) == 1
    feed.publish(TYPED)

    assert [o.status for o in reg.outcomes] == [OutcomeStatus.APPLIED]
    assert editor.document.text == "x = `a ${`;"


def test_active_editor_is_read_per_event() -> None:
    feed = ChangeFeed()
    editor = make_editor()
    current: list[DocumentEditor | None] = [None]
    reg = register(feed, ConversionHandler(editor), lambda: current[0], keep_outcomes=True)

    feed.publish(TYPED)
    current[0] = editor
    feed.publish(TYPED)

    assert [o.status for o in reg.outcomes] == [OutcomeStatus.IGNORED, OutcomeStatus.APPLIED]


def test_outcomes_not_kept_by_default() -> None:
    feed = ChangeFeed()
    editor = make_editor()
    reg = register(feed, ConversionHandler(editor), lambda: editor)
    feed.publish(TYPED)
    assert reg.outcomes == []


def test_release_unsubscribes_once() -> None:
    feed = ChangeFeed()
    editor = make_editor()
    reg = register(feed, ConversionHandler(editor), lambda: editor)
    assert reg.active

    reg.release()
    reg.release()

    assert not reg.active
    assert len(feed) == 0
    feed.publish(TYPED)
    assert editor.document.text == "x = 'a ${';"


def test_registration_as_context_manager() -> None:
    feed = ChangeFeed()
    editor = make_editor()
    with register(feed, ConversionHandler(editor), lambda: editor, keep_outcomes=True) as reg:
        assert len(feed) == 1
    assert not reg.active
    assert len(feed) == 0


def test_listeners_run_in_subscription_order() -> None:
    feed = ChangeFeed()
    order: list[str] = []
    feed.subscribe(lambda e: order.append("first"))
    unsubscribe = feed.subscribe(lambda e: order.append("second"))
    feed.publish(TYPED)
    unsubscribe()
    feed.publish(TYPED)
    assert order == ["first", "second", "first"]
