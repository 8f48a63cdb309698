"""
Optimal-fit line breaking.

Dynamic programming over break candidates, in the spirit of Knuth-Plass but
with a row budget instead of a fitness-class network: ``best[k][i]`` is the
cheapest way to set everything before candidate ``i`` on exactly ``k`` rows.
The table is filled left to right and the winner is rebuilt from
backpointers, so long paragraphs never recurse.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence, Tuple

from .cost import CostModel, LineCost, holds_single_oversized_word, line_items
from .errors import UnbreakableError
from .models import BreakCandidate, BreakKind, Layout, Line, Token

logger = logging.getLogger(__name__)

INFINITY = math.inf


def solve_layout(
    tokens: Sequence[Token],
    candidates: Sequence[BreakCandidate],
    *,
    target_width: int,
    max_lines: int | None,
    cost_model: CostModel,
) -> Layout:
    """
    Find the cheapest admissible partition of ``tokens`` into at most ``max_lines`` lines.

    A line is admissible when it fits ``target_width`` or consists of one word
    flagged as oversized. No line may run across a forced break. When several
    predecessors tie, the later one wins so the current line carries more
    text; when several row counts tie, the fewer rows win.
    """
    count = len(candidates)
    if count < 2:
        return Layout()

    limit = count - 1 if max_lines is None else min(max_lines, count - 1)
    best: List[List[float]] = [[INFINITY] * count for _ in range(limit + 1)]
    back: List[List[int]] = [[-1] * count for _ in range(limit + 1)]
    best[0][0] = 0.0
    evaluated: Dict[Tuple[int, int], Tuple[int, LineCost]] = {}

    for i in range(1, count):
        current = candidates[i]
        terminal = current.mandatory or i == count - 1
        for j in range(i - 1, -1, -1):
            previous = candidates[j]
            items = line_items(tokens, previous.position, current.position)
            width = sum(item.width for item in items)
            if width <= target_width or holds_single_oversized_word(items):
                cost = cost_model.line_cost(
                    previous, current, width, target_width, terminal=terminal
                )
                evaluated[(j, i)] = (width, cost)
                line_total = cost.total
                for k in range(1, min(limit, j + 1) + 1):
                    reached = best[k - 1][j]
                    if reached == INFINITY:
                        continue
                    value = reached + line_total
                    if value < best[k][i]:
                        best[k][i] = value
                        back[k][i] = j
            if width > target_width:
                break
            if previous.mandatory or previous.kind is BreakKind.START:
                break

    end = count - 1
    rows = 0
    total = INFINITY
    for k in range(1, limit + 1):
        if best[k][end] < total:
            total = best[k][end]
            rows = k
    if total == INFINITY:
        raise UnbreakableError(
            f"No admissible layout fits {target_width}px within {max_lines} lines",
            max_lines,
        )

    lines: List[Line] = []
    i = end
    for k in range(rows, 0, -1):
        j = back[k][i]
        width, cost = evaluated[(j, i)]
        lines.append(
            Line(
                start=candidates[j].position,
                end=candidates[i].position,
                natural_width=width,
                badness=cost.badness,
                penalty=cost.penalty,
                demerit=cost.demerit,
            )
        )
        i = j
    lines.reverse()

    logger.debug(
        "Solved %d break candidates into %d lines (total cost %.3f)",
        count,
        rows,
        total,
    )
    return Layout(lines=tuple(lines), total_cost=total)
