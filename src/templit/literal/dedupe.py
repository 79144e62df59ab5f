from __future__ import annotations

from collections.abc import Iterable

from templit.core import ConversionBatch, LiteralBoundary


def dedupe(literals: Iterable[LiteralBoundary]) -> ConversionBatch:
    """
    Collapse literals to one entry per (line, start, end), keeping the first
    one seen. The quote character is not part of the key.
    """
    seen: set[tuple[int, int, int]] = set()
    unique: list[LiteralBoundary] = []
    for lit in literals:
        if lit.key in seen:
            continue
        seen.add(lit.key)
        unique.append(lit)
    return tuple(unique)
