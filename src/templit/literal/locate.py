from __future__ import annotations

from collections.abc import Collection

from templit.core import DEFAULT_QUOTES, ESCAPE_CHAR, LiteralBoundary, QuoteChar


def _is_escaped(text: str, i: int, escape: str) -> bool:
    # Single-character lookbehind only: "\\\"" still counts as escaped.
    return i > 0 and text[i - 1] == escape


def _find_opening(
    text: str, cursor: int, quotes: Collection[str], escape: str
) -> tuple[int, QuoteChar] | None:
    for i in range(cursor - 1, -1, -1):
        ch = text[i]
        if ch not in quotes or _is_escaped(text, i, escape):
            continue

        # Raw count, escaped occurrences included. An even number of the same
        # quote before `i` means `i` opens a literal; odd means it closes an
        # earlier one and the scan moves on.
        if text.count(ch, 0, i) % 2 == 0:
            return i, QuoteChar(ch)

    return None


def _find_closing(text: str, cursor: int, quote: str, escape: str) -> int | None:
    for j in range(cursor, len(text)):
        if text[j] == quote and not _is_escaped(text, j, escape):
            return j
    return None


def locate(
    line_text: str,
    cursor_column: int,
    *,
    line: int = 0,
    quotes: Collection[str] = DEFAULT_QUOTES,
    escape: str = ESCAPE_CHAR,
) -> LiteralBoundary | None:
    """
    Find the string literal on `line_text` that encloses `cursor_column`.

    The opening quote is the nearest unescaped quote left of the cursor that is
    preceded by an even number of the same character; the closing quote is the
    first unescaped occurrence of that character at or right of the cursor.
    Returns None when either side is missing.

    Heuristic only; we don't track the other quote character, nested literals,
    or runs of backslashes. Results for unbalanced lines are deterministic but
    may not match what a tokenizer would say.
    """
    if not (0 <= cursor_column <= len(line_text)):
        raise ValueError(
            f"cursor column {cursor_column} out of range [0, {len(line_text)}]"
        )

    quote_set = frozenset(str(q) for q in quotes)
    opening = _find_opening(line_text, cursor_column, quote_set, escape)
    if opening is None:
        return None
    start, quote = opening

    end = _find_closing(line_text, cursor_column, quote, escape)
    if end is None:
        return None

    return LiteralBoundary(line=line, start=start, end=end, quote=quote)
