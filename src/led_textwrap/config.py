from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping

import yaml


class Alignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"


class OverflowPolicy(str, Enum):
    TRUNCATE = "truncate"
    ALLOW_OVERFULL = "allow_overfull"
    ERROR = "error"


SOFT_HYPHEN = "\u00ad"

NON_NEGATIVE_FIELDS = (
    "leading",
    "hyphenation_penalty",
    "consecutive_hyphen_demerit",
    "stretch_weight",
    "overfull_base",
    "glue_stretch_ratio",
    "glue_shrink_ratio",
)


@dataclass(slots=True)
class FontSettings:
    """Configuration block describing where glyph widths come from."""

    kind: str = "fixed"
    path: str | None = None
    glyph_width: int = 6
    glyph_height: int = 8
    widths: Dict[str, int] = field(default_factory=dict)
    default_width: int | None = None
    kerning_offset: int = 0


@dataclass(slots=True)
class WrapConfig:
    """Configuration options for wrapping text onto a pixel panel."""

    target_width_px: int = 64
    max_lines: int | None = 4
    panel_height_px: int | None = None
    leading: int = 0
    alignment: Alignment = Alignment.LEFT
    hyphenation_penalty: float = 50.0
    consecutive_hyphen_demerit: float = 200.0
    overflow_policy: OverflowPolicy = OverflowPolicy.ALLOW_OVERFULL
    hyphen_marker: str = SOFT_HYPHEN
    hyphen_glyph: str = "-"
    stretch_weight: float = 10.0
    overfull_base: float = 1_000_000.0
    glue_stretch_ratio: float = 1.0
    glue_shrink_ratio: float = 0.33
    font: FontSettings = field(default_factory=FontSettings)

    def __post_init__(self) -> None:
        self.alignment = _coerce_enum(Alignment, self.alignment, "alignment")
        self.overflow_policy = _coerce_enum(
            OverflowPolicy, self.overflow_policy, "overflow_policy"
        )
        if self.target_width_px <= 0:
            raise ValueError("target_width_px must be a positive number of pixels.")
        if self.max_lines is not None and self.max_lines < 1:
            raise ValueError("max_lines must be at least 1 when provided.")
        if len(self.hyphen_marker) != 1:
            raise ValueError("hyphen_marker must be a single character.")
        for name in NON_NEGATIVE_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative.")
        if self.panel_height_px is not None and self.panel_height_px <= 0:
            raise ValueError("panel_height_px must be a positive number of pixels.")

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        data = dict(asdict(self))
        data["alignment"] = self.alignment.value
        data["overflow_policy"] = self.overflow_policy.value
        return data


def _coerce_enum(enum_type: type[Enum], value: Any, name: str) -> Any:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(str(value).lower().strip())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ValueError(f"Unknown {name} '{value}' (expected one of: {allowed}).") from exc


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {field.name for field in fields(WrapConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    if "font" in data:
        font_value = data["font"]
        if isinstance(font_value, FontSettings):
            kwargs["font"] = font_value
        elif isinstance(font_value, Mapping):
            kwargs["font"] = _build_font_settings(font_value)
        else:
            kwargs.pop("font")
    return kwargs


def _build_font_settings(data: Mapping[str, Any]) -> FontSettings:
    font_allowed = {field.name for field in fields(FontSettings)}
    filtered = {key: data[key] for key in data if key in font_allowed}
    return FontSettings(**filtered)


def config_from_dict(data: Mapping[str, Any] | None) -> WrapConfig:
    """Build a WrapConfig from a dictionary-like input."""
    if data is None:
        return WrapConfig()
    return WrapConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> WrapConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> WrapConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return WrapConfig()
    return config_from_yaml(path)
