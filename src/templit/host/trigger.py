from __future__ import annotations

from collections.abc import Iterable

from templit.core import LineTextOf
from templit.host.events import TextChange
from templit.profile import Profile


def is_trigger(change: TextChange, line_text: str, profile: Profile) -> bool:
    """
    True when `change` inserted the last character of the profile trigger and
    the rest of the trigger sits immediately before the insertion point.

    `line_text` is the line the change starts on, after the change was applied.
    Text before the insertion point is unaffected by an insertion, so reading
    it post-change is safe.
    """
    if change.text != profile.trigger_char:
        return False

    prefix = profile.trigger_prefix
    col = change.range.start.column
    if col < len(prefix):
        return False
    return line_text[col - len(prefix):col] == prefix


def first_trigger(
    changes: Iterable[TextChange], line_text_of: LineTextOf, profile: Profile
) -> TextChange | None:
    for change in changes:
        if change.text != profile.trigger_char:
            continue
        if is_trigger(change, line_text_of(change.range.start.line), profile):
            return change
    return None
