"""
Glyph metrics providers.

The layout core only ever asks "how many pixels does this glyph advance?".
Providers answer that question for monospace panels, explicit width tables,
and the BDF bitmap fonts the LED matrix library renders with.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping

from bdflib import model, reader

from .errors import FontLoadError, MissingGlyphError

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .config import WrapConfig

logger = logging.getLogger(__name__)

REPLACEMENT_CHAR = "\ufffd"


class GlyphMetrics(ABC):
    """Abstract provider of per-glyph pixel advances for a single font."""

    height: int = 0

    @abstractmethod
    def glyph_width(self, glyph: str) -> int:
        """Return the horizontal advance of ``glyph`` in pixels."""
        raise NotImplementedError

    def text_width(self, text: str, kerning_offset: int = 0) -> int:
        return sum(self.glyph_width(glyph) + kerning_offset for glyph in text)


class FixedWidthMetrics(GlyphMetrics):
    """Every glyph advances by the same number of pixels."""

    def __init__(self, width: int, height: int = 8) -> None:
        if width <= 0:
            raise ValueError("Fixed glyph width must be positive.")
        self.width = width
        self.height = height

    def glyph_width(self, glyph: str) -> int:
        return self.width


class TableMetrics(GlyphMetrics):
    """Widths looked up from an explicit glyph -> pixels mapping."""

    def __init__(
        self,
        widths: Mapping[str, int],
        default_width: int | None = None,
        height: int = 8,
    ) -> None:
        self.widths: Dict[str, int] = dict(widths)
        self.default_width = default_width
        self.height = height

    def glyph_width(self, glyph: str) -> int:
        width = self.widths.get(glyph)
        if width is not None:
            return width
        if self.default_width is None:
            raise MissingGlyphError(glyph)
        return self.default_width


class BDFFontMetrics(GlyphMetrics):
    """
    Glyph advances read from a BDF bitmap font.

    Only advances and vertical metrics are kept; bitmaps are left to the
    renderer. Missing glyphs fall back to U+FFFD when the font has it,
    otherwise to the widest advance in the font.
    """

    def __init__(
        self,
        advances: Mapping[int, int],
        *,
        default_advance: int,
        ascent: int,
        descent: int,
        name: str = "",
    ) -> None:
        self.advances: Dict[int, int] = dict(advances)
        self.default_advance = default_advance
        self.ascent = ascent
        self.descent = descent
        self.height = ascent + descent
        self.name = name

    @property
    def baseline(self) -> int:
        """Pixels from the top line to the baseline."""
        return self.ascent

    def glyph_width(self, glyph: str) -> int:
        advance = self.advances.get(ord(glyph))
        if advance is not None:
            return advance
        fallback = self.advances.get(ord(REPLACEMENT_CHAR))
        if fallback is not None:
            return fallback
        return self.default_advance

    @classmethod
    def from_font(cls, font: model.Font, name: str = "") -> "BDFFontMetrics":
        """Build metrics from a font already parsed by bdflib."""
        advances = {
            glyph.codepoint: glyph.advance
            for glyph in font.glyphs
            if glyph.codepoint is not None and glyph.codepoint >= 0
        }
        ascent = font.properties.get(b"FONT_ASCENT")
        descent = font.properties.get(b"FONT_DESCENT")
        if not isinstance(ascent, int) or not isinstance(descent, int):
            # No usable properties: take the extent of the glyph bounding boxes.
            boxes = [glyph.get_bounding_box() for glyph in font.glyphs]
            ascent = max((bottom + height for _, bottom, _, height in boxes), default=0)
            descent = max((-bottom for _, bottom, _, _ in boxes), default=0)
        return cls(
            advances,
            default_advance=max((glyph.advance for glyph in font.glyphs), default=0),
            ascent=ascent,
            descent=max(descent, 0),
            name=name,
        )

    @classmethod
    def from_path(cls, path: str | Path) -> "BDFFontMetrics":
        font_path = Path(path)
        if not font_path.exists():
            raise FontLoadError(f"BDF font not found: {font_path}")
        try:
            with font_path.open("rb") as handle:
                metrics = parse_bdf(handle, name=font_path.name)
        except OSError as exc:
            raise FontLoadError(f"Unable to read BDF font: {font_path}") from exc
        logger.info(
            "Loaded BDF font %s (%d glyphs, height %dpx)",
            font_path.name,
            len(metrics.advances),
            metrics.height,
        )
        return metrics


def parse_bdf(lines: Iterable[bytes], name: str = "") -> BDFFontMetrics:
    """Parse BDF source lines with bdflib and keep the metrics."""

    def report_warning(lineno: int, message: str) -> None:
        logger.debug("BDF %s line %d: %s", name or "<font>", lineno, message)

    try:
        font = reader.read_bdf(lines, report_warning)
    except (reader.ParseError, ValueError) as exc:
        raise FontLoadError(f"Malformed BDF font {name or '<font>'}: {exc}") from exc
    return BDFFontMetrics.from_font(font, name=name)


def create_metrics(kind: str, **kwargs: Any) -> GlyphMetrics:
    """Factory for building metrics providers by name."""
    normalized = kind.lower().strip()
    if normalized == "fixed":
        return FixedWidthMetrics(
            kwargs.get("glyph_width", 6), height=kwargs.get("glyph_height", 8)
        )
    if normalized == "table":
        return TableMetrics(
            kwargs.get("widths", {}),
            default_width=kwargs.get("default_width"),
            height=kwargs.get("glyph_height", 8),
        )
    if normalized == "bdf":
        path = kwargs.get("path")
        if not path:
            raise ValueError("BDF metrics require a font path.")
        return BDFFontMetrics.from_path(path)
    raise ValueError(f"Unknown metrics kind '{kind}'.")


def build_metrics_from_config(config: "WrapConfig") -> GlyphMetrics:
    """Convenience helper to build a metrics provider from WrapConfig."""
    font = config.font
    return create_metrics(
        font.kind,
        path=font.path,
        glyph_width=font.glyph_width,
        glyph_height=font.glyph_height,
        widths=font.widths,
        default_width=font.default_width,
    )
