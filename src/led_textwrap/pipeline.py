from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Sequence

from .breaks import enumerate_breaks
from .config import OverflowPolicy, WrapConfig
from .cost import CostModel
from .emitter import emit_lines
from .errors import OversizedTokenError
from .metrics import GlyphMetrics
from .models import BreakCandidate, Layout, LineRecord, Token, Word
from .solver import solve_layout
from .tokenization import tokenize_paragraph

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WrapResult:
    """Everything produced while wrapping one paragraph."""

    text: str
    tokens: tuple[Token, ...]
    candidates: List[BreakCandidate]
    layout: Layout
    lines: List[LineRecord]

    @property
    def source_text(self) -> str:
        """Normalized paragraph text rebuilt from the emitted lines."""
        return "".join(line.source for line in self.lines)


def wrap_paragraph(
    text: str,
    metrics: GlyphMetrics,
    config: WrapConfig | None = None,
) -> WrapResult:
    """Run tokenize -> overflow policy -> enumerate -> solve -> emit for one paragraph."""
    cfg = config or WrapConfig()
    tokens = tokenize_paragraph(
        text,
        metrics.glyph_width,
        kerning_offset=cfg.font.kerning_offset,
        hyphen_marker=cfg.hyphen_marker,
        hyphen_glyph=cfg.hyphen_glyph,
        hyphenation_penalty=cfg.hyphenation_penalty,
        glue_stretch_ratio=cfg.glue_stretch_ratio,
        glue_shrink_ratio=cfg.glue_shrink_ratio,
    )
    tokens = prepare_tokens(tokens, metrics, cfg)
    candidates = enumerate_breaks(tokens)
    layout = solve_layout(
        tokens,
        candidates,
        target_width=cfg.target_width_px,
        max_lines=resolve_max_lines(cfg, metrics),
        cost_model=CostModel.from_config(cfg),
    )
    lines = emit_lines(
        layout,
        tokens,
        target_width=cfg.target_width_px,
        alignment=cfg.alignment,
        hyphen_glyph=cfg.hyphen_glyph,
        hyphen_marker=cfg.hyphen_marker,
    )
    return WrapResult(
        text=text, tokens=tokens, candidates=candidates, layout=layout, lines=lines
    )


def wrap_paragraphs(
    texts: Iterable[str],
    metrics: GlyphMetrics,
    config: WrapConfig | None = None,
) -> List[WrapResult]:
    """Wrap independent paragraphs with a shared font and configuration."""
    return [wrap_paragraph(text, metrics, config) for text in texts]


def resolve_max_lines(config: WrapConfig, metrics: GlyphMetrics) -> int | None:
    """
    Row budget for the panel.

    An explicit ``max_lines`` wins. Otherwise the budget is derived from the
    panel height, the font height and the leading between rows; with neither
    the budget is unbounded.
    """
    if config.max_lines is not None:
        return config.max_lines
    if config.panel_height_px is None:
        return None
    pitch = metrics.height + config.leading
    if pitch <= 0:
        return None
    return (config.panel_height_px + config.leading) // pitch


def prepare_tokens(
    tokens: Sequence[Token],
    metrics: GlyphMetrics,
    config: WrapConfig,
) -> tuple[Token, ...]:
    """Apply the overflow policy to words that cannot fit the panel."""
    width = config.target_width_px
    prepared: List[Token] = []
    for token in tokens:
        if not isinstance(token, Word) or _fits(token, width):
            prepared.append(token)
            continue
        policy = config.overflow_policy
        if policy is OverflowPolicy.ERROR:
            raise OversizedTokenError(token.text, token.width, width)
        if policy is OverflowPolicy.TRUNCATE:
            clipped = _truncate(token, metrics, config.font.kerning_offset, width)
            logger.warning(
                "Truncated %r to %r to fit %dpx", token.text, clipped.text, width
            )
            prepared.append(clipped)
        else:
            logger.warning(
                "Word %r (%dpx) overflows the %dpx panel", token.text, token.width, width
            )
            prepared.append(replace(token, hyphens=(), oversized=True))
    return tuple(prepared)


def _fits(word: Word, width: int) -> bool:
    """True when every piece between consecutive hyphenation points fits."""
    offsets = [point.offset for point in word.hyphens]
    starts: List[int] = [0, *offsets]
    ends: List[int | None] = [*offsets, None]
    return all(
        word.fragment_width(start, end) <= width for start, end in zip(starts, ends)
    )


def _truncate(word: Word, metrics: GlyphMetrics, kerning_offset: int, width: int) -> Word:
    kept = 0
    used = 0
    for glyph in word.text:
        advance = metrics.glyph_width(glyph) + kerning_offset
        if kept and used + advance > width:
            break
        kept += 1
        used += advance
    return Word(
        text=word.text[:kept],
        width=used,
        oversized=used > width,
        truncated=True,
    )
