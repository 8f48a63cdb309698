from __future__ import annotations

import math
from typing import List, Sequence

from .config import SOFT_HYPHEN, Alignment
from .cost import LineItem, line_items
from .models import ForcedBreak, Glue, Layout, Line, LineRecord, TextRun, Token, Word


def emit_lines(
    layout: Layout,
    tokens: Sequence[Token],
    *,
    target_width: int,
    alignment: Alignment = Alignment.LEFT,
    hyphen_glyph: str = "-",
    hyphen_marker: str = SOFT_HYPHEN,
) -> List[LineRecord]:
    """
    Turn a solved layout into positioned, renderer-ready line records.

    Justified alignment spreads slack across interior glue except on the last
    line, on lines that end at a forced break and on lines with no glue; those
    stay left-aligned.
    """
    records: List[LineRecord] = []
    last_row = len(layout.lines) - 1
    for row, line in enumerate(layout.lines):
        items = line_items(tokens, line.start, line.end)
        terminal = row == last_row or _ends_at_forced_break(tokens, line)
        overfull = line.natural_width > target_width
        x_offset, spacing = _align(
            items, line.natural_width, target_width, alignment, terminal, overfull
        )
        records.append(
            LineRecord(
                row=row,
                token_range=(line.token_range.start, line.token_range.stop),
                start=line.start,
                end=line.end,
                text=_render_text(items, hyphen_glyph),
                source=_source_text(tokens, line, hyphen_marker),
                pixel_width=line.natural_width,
                x_offset=x_offset,
                glue_spacing=spacing,
                runs=_place_runs(items, x_offset, spacing, hyphen_glyph),
                overfull=overfull,
                truncated=any(
                    isinstance(item.token, Word) and item.token.truncated
                    for item in items
                ),
            )
        )
    return records


def _ends_at_forced_break(tokens: Sequence[Token], line: Line) -> bool:
    if line.end.offset or line.end.token == 0:
        return False
    return isinstance(tokens[line.end.token - 1], ForcedBreak)


def _align(
    items: Sequence[LineItem],
    width: int,
    target_width: int,
    alignment: Alignment,
    terminal: bool,
    overfull: bool,
) -> tuple[int, tuple[int, ...]]:
    glue = [item.token for item in items if isinstance(item.token, Glue)]
    no_spacing = tuple(0 for _ in glue)
    if overfull:
        return 0, no_spacing
    slack = target_width - width
    if alignment is Alignment.RIGHT:
        return slack, no_spacing
    if alignment is Alignment.CENTER:
        return slack // 2, no_spacing
    if alignment is Alignment.JUSTIFY and not terminal:
        return 0, _distribute(slack, glue)
    return 0, no_spacing


def _distribute(slack: int, glue: Sequence[Glue]) -> tuple[int, ...]:
    """Split ``slack`` pixels across glue in proportion to stretch."""
    total_stretch = sum(g.stretch for g in glue)
    if not glue or total_stretch <= 0 or slack <= 0:
        return tuple(0 for _ in glue)
    shares = [math.floor(slack * g.stretch / total_stretch) for g in glue]
    remainder = slack - sum(shares)
    for idx, g in enumerate(glue):
        if remainder <= 0:
            break
        if g.stretch > 0:
            shares[idx] += 1
            remainder -= 1
    return tuple(shares)


def _fragment(item: LineItem, hyphen_glyph: str) -> str:
    word = item.token
    assert isinstance(word, Word)
    text = word.text[item.start : item.end]
    return text + hyphen_glyph if item.end is not None else text


def _render_text(items: Sequence[LineItem], hyphen_glyph: str) -> str:
    return "".join(
        _fragment(item, hyphen_glyph) if isinstance(item.token, Word) else " "
        for item in items
    )


def _source_text(tokens: Sequence[Token], line: Line, marker: str) -> str:
    chunks: List[str] = []
    for idx in line.token_range:
        token = tokens[idx]
        if isinstance(token, Word):
            lo = line.start.offset if idx == line.start.token else 0
            hi = line.end.offset if (idx == line.end.token and line.end.offset) else None
            chunks.append(token.source(lo, hi, marker))
        elif isinstance(token, Glue):
            chunks.append(" ")
        else:
            chunks.append("\n")
    return "".join(chunks)


def _place_runs(
    items: Sequence[LineItem],
    x_offset: int,
    spacing: Sequence[int],
    hyphen_glyph: str,
) -> tuple[TextRun, ...]:
    runs: List[TextRun] = []
    x = x_offset
    glue_no = 0
    for item in items:
        if isinstance(item.token, Word):
            runs.append(TextRun(x=x, text=_fragment(item, hyphen_glyph), token_index=item.index))
            x += item.width
        else:
            x += item.width + spacing[glue_no]
            glue_no += 1
    return tuple(runs)
