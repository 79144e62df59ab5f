from __future__ import annotations

import pytest

from templit.host.events import Range, TextChange
from templit.host.trigger import first_trigger, is_trigger
from templit.profile import get_profile

JS = get_profile("javascript")

# after typing "{" at column 18
LINE = "const a = 'hello ${';"


def test_brace_after_dollar_is_trigger() -> None:
    assert is_trigger(TextChange.insert(0, 18, "{"), LINE, JS)


@pytest.mark.parametrize(
    "change,line_text",
    [
        (TextChange.insert(0, 17, "$"), LINE),               # wrong character
        (TextChange.insert(0, 18, "${"), LINE),              # pasted, not typed
        (TextChange.insert(0, 0, "{"), "{"),                 # nothing before it
        (TextChange.insert(0, 11, "{"), "const a = '{';"),   # no "$" before it
        (TextChange.insert(0, 18, ""), LINE),                # deletion
    ],
)
def test_not_a_trigger(change: TextChange, line_text: str) -> None:
    assert not is_trigger(change, line_text, JS)


def test_custom_trigger() -> None:
    prof = JS.evolve(trigger="#{{")
    line = "x = 'a #{{b';"
    assert is_trigger(TextChange.insert(0, 9, "{"), line, prof)
    assert not is_trigger(TextChange.insert(0, 9, "{"), "x = 'a $#{b';", prof)


def test_replacement_range_uses_start_column() -> None:
    change = TextChange(Range.caret(0, 18), "{")
    assert is_trigger(change, LINE, JS)


def test_first_trigger_picks_first_match() -> None:
    lines = {0: "a = '${';", 1: LINE}
    changes = [
        TextChange.insert(0, 2, "x"),
        TextChange.insert(1, 18, "{"),
        TextChange.insert(0, 6, "{"),
    ]
    assert first_trigger(changes, lines.__getitem__, JS) == changes[1]


def test_first_trigger_skips_line_lookup_for_other_text() -> None:
    seen: list[int] = []

    def line_text_of(line: int) -> str:
        seen.append(line)
        return LINE

    changes = [TextChange.insert(9, 0, "abc"), TextChange.insert(0, 18, "{")]
    assert first_trigger(changes, line_text_of, JS) == changes[1]
    assert seen == [0]
    assert first_trigger([], line_text_of, JS) is None
