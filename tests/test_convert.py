from __future__ import annotations

from templit.convert import convert
from templit.core import CursorQuery, LiteralBoundary, QuoteChar
from templit.profile import get_profile, make_javascript_profile


LINES = [
    "const a = 'hello ${';",
    'const b = "world";',
    "const n = 42;",
    "const t = `already ${x}`;",
]


def line_text_of(line: int) -> str:
    return LINES[line]


def test_convert_single_cursor() -> None:
    batch = convert([CursorQuery(0, 13)], line_text_of)
    assert batch == (LiteralBoundary(0, 10, 19, QuoteChar.SINGLE),)


def test_convert_cursors_in_same_literal_collapse() -> None:
    cursors = [CursorQuery(1, 11), CursorQuery(1, 14), CursorQuery(1, 16)]
    batch = convert(cursors, line_text_of)
    assert len(batch) == 1
    assert batch[0] == LiteralBoundary(1, 10, 16, QuoteChar.DOUBLE)


def test_convert_drops_cursor_outside_literal() -> None:
    batch = convert([CursorQuery(2, 12), CursorQuery(1, 12)], line_text_of)
    assert batch == (LiteralBoundary(1, 10, 16, QuoteChar.DOUBLE),)


def test_convert_keeps_cursor_order() -> None:
    batch = convert([CursorQuery(1, 12), CursorQuery(0, 12)], line_text_of)
    assert [lit.line for lit in batch] == [1, 0]


def test_convert_empty() -> None:
    assert convert([], line_text_of) == ()
    assert convert([CursorQuery(2, 11)], line_text_of) == ()


def test_convert_skips_template_literals() -> None:
    # Even when backticks are recognized, they are never converted.
    prof = make_javascript_profile({"recognized_quotes": ["'", '"', "`"]})
    assert convert([CursorQuery(3, 14)], line_text_of, profile=prof) == ()


def test_convert_with_restricted_profile() -> None:
    prof = get_profile("javascript").evolve(
        recognized_quotes=["'"],
        convertible_quotes=["'"],
    )
    cursors = [CursorQuery(0, 12), CursorQuery(1, 12)]
    batch = convert(cursors, line_text_of, profile=prof)
    assert batch == (LiteralBoundary(0, 10, 19, QuoteChar.SINGLE),)


def test_convert_only_reads_lines_with_cursors() -> None:
    seen: list[int] = []

    def spy(line: int) -> str:
        seen.append(line)
        return LINES[line]

    convert([CursorQuery(1, 12), CursorQuery(1, 13)], spy)
    assert seen == [1, 1]
