from __future__ import annotations

from typing import List, Sequence

from .models import BreakCandidate, BreakKind, ForcedBreak, Glue, Position, Token, Word


def enumerate_breaks(tokens: Sequence[Token]) -> List[BreakCandidate]:
    """
    Return every legal line end in stream order.

    The list always opens with a START candidate at ``Position(0, 0)`` and
    closes with the candidate sitting at ``Position(len(tokens), 0)``. Lines may
    end after glue, after a forced break (mandatory), or at an explicit
    hyphenation point inside a word; nowhere else.
    """
    candidates: List[BreakCandidate] = []

    def add(position: Position, kind: BreakKind, penalty: float = 0.0) -> None:
        candidates.append(BreakCandidate(len(candidates), position, kind, penalty))

    add(Position(0), BreakKind.START)
    for idx, token in enumerate(tokens):
        if isinstance(token, Word):
            for point in token.hyphens:
                add(Position(idx, point.offset), BreakKind.HYPHEN, point.penalty)
        elif isinstance(token, Glue):
            add(Position(idx + 1), BreakKind.GLUE)
        elif isinstance(token, ForcedBreak):
            add(Position(idx + 1), BreakKind.FORCED)

    end = Position(len(tokens))
    if candidates[-1].position != end:
        add(end, BreakKind.END)
    return candidates


def consecutive_hyphens(previous: BreakCandidate, current: BreakCandidate) -> bool:
    """True when a line both starts and ends at a hyphenation point."""
    return previous.kind is BreakKind.HYPHEN and current.kind is BreakKind.HYPHEN
