"""
led_textwrap package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .config import (
    Alignment,
    FontSettings,
    OverflowPolicy,
    WrapConfig,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from .errors import (
    FontLoadError,
    InvalidInputError,
    LayoutError,
    MissingGlyphError,
    OversizedTokenError,
    UnbreakableError,
)
from .metrics import (
    BDFFontMetrics,
    FixedWidthMetrics,
    GlyphMetrics,
    TableMetrics,
    build_metrics_from_config,
    create_metrics,
)
from .pipeline import WrapResult, wrap_paragraph, wrap_paragraphs

__all__ = [
    "Alignment",
    "FontSettings",
    "OverflowPolicy",
    "WrapConfig",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "LayoutError",
    "InvalidInputError",
    "UnbreakableError",
    "OversizedTokenError",
    "MissingGlyphError",
    "FontLoadError",
    "GlyphMetrics",
    "FixedWidthMetrics",
    "TableMetrics",
    "BDFFontMetrics",
    "create_metrics",
    "build_metrics_from_config",
    "WrapResult",
    "wrap_paragraph",
    "wrap_paragraphs",
]

__version__ = "0.1.0"
