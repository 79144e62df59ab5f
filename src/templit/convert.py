from __future__ import annotations

from collections.abc import Iterable

from templit.core import ConversionBatch, CursorQuery, LineTextOf, LiteralBoundary
from templit.literal.dedupe import dedupe
from templit.literal.locate import locate
from templit.profile import Profile, default_profile


def convert(
    cursors: Iterable[CursorQuery],
    line_text_of: LineTextOf,
    *,
    profile: Profile | None = None,
) -> ConversionBatch:
    """
    Locate the literal around every cursor and return the ones worth converting,
    once each, in cursor order.

    Literals already using a non-convertible delimiter (e.g. a template literal)
    are dropped, as are cursors that sit outside any literal. Nothing is edited
    here; the batch is handed to whoever owns the document.
    """
    prof = profile or default_profile()

    found: list[LiteralBoundary] = []
    for cursor in cursors:
        lit = locate(
            line_text_of(cursor.line),
            cursor.column,
            line=cursor.line,
            quotes=prof.recognized_quotes,
            escape=prof.escape_char,
        )
        if lit is not None and lit.quote in prof.convertible_quotes:
            found.append(lit)

    return dedupe(found)
