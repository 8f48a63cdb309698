from __future__ import annotations

from itertools import combinations
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from led_textwrap.cost import CostModel, holds_single_oversized_word, line_items
from led_textwrap.models import BreakCandidate, Token


def write_minimal_bdf(
    path: Path,
    advances: Dict[str, int],
    *,
    bbox: Tuple[int, int] = (6, 9),
    ascent: int = 7,
    descent: int = 2,
) -> None:
    """Create a minimal BDF font whose glyphs advance by the given widths."""
    lines = [
        "STARTFONT 2.1",
        "FONT -test-Fixed-Medium-R-Normal--9-90-75-75-C-60-ISO10646-1",
        "SIZE 9 75 75",
        f"FONTBOUNDINGBOX {bbox[0]} {bbox[1]} 0 -{descent}",
        "STARTPROPERTIES 2",
        f"FONT_ASCENT {ascent}",
        f"FONT_DESCENT {descent}",
        "ENDPROPERTIES",
        f"CHARS {len(advances)}",
    ]
    for glyph, width in advances.items():
        lines.extend(
            [
                f"STARTCHAR U+{ord(glyph):04X}",
                f"ENCODING {ord(glyph)}",
                "SWIDTH 500 0",
                f"DWIDTH {width} 0",
                f"BBX {width} 1 0 0",
                "BITMAP",
                "00" * max(1, (width + 7) // 8),
                "ENDCHAR",
            ]
        )
    lines.append("ENDFONT")
    path.write_text("\n".join(lines) + "\n", encoding="latin-1")


def brute_force_layouts(
    tokens: Sequence[Token],
    candidates: Sequence[BreakCandidate],
    *,
    target_width: int,
    max_lines: int,
    cost_model: CostModel,
) -> List[Tuple[float, List[int]]]:
    """Enumerate every admissible partition as (total cost, candidate indices)."""
    last = len(candidates) - 1
    forced = [c.index for c in candidates[1:last] if c.mandatory]
    optional = [c.index for c in candidates[1:last] if not c.mandatory]
    results: List[Tuple[float, List[int]]] = []
    for size in range(len(optional) + 1):
        for chosen in combinations(optional, size):
            breaks = [0, *sorted([*forced, *chosen]), last]
            if len(breaks) - 1 > max_lines:
                continue
            total = 0.0
            admissible = True
            for j, i in zip(breaks, breaks[1:]):
                previous, current = candidates[j], candidates[i]
                items = line_items(tokens, previous.position, current.position)
                width = sum(item.width for item in items)
                if width > target_width and not holds_single_oversized_word(items):
                    admissible = False
                    break
                total += cost_model.line_cost(
                    previous,
                    current,
                    width,
                    target_width,
                    terminal=current.mandatory or i == last,
                ).total
            if admissible:
                results.append((total, breaks))
    return results
