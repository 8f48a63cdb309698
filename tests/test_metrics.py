from pathlib import Path

import pytest

from led_textwrap.config import FontSettings, WrapConfig
from led_textwrap.errors import FontLoadError, MissingGlyphError
from led_textwrap.metrics import (
    BDFFontMetrics,
    FixedWidthMetrics,
    TableMetrics,
    build_metrics_from_config,
    create_metrics,
    parse_bdf,
)
from tests.utils import write_minimal_bdf


def test_fixed_width_metrics():
    metrics = FixedWidthMetrics(6, height=8)
    assert metrics.glyph_width("W") == 6
    assert metrics.text_width("abc") == 18
    assert metrics.text_width("abc", kerning_offset=1) == 21
    assert metrics.height == 8


def test_fixed_width_metrics_rejects_non_positive_width():
    with pytest.raises(ValueError):
        FixedWidthMetrics(0)


def test_table_metrics_lookup_and_default():
    metrics = TableMetrics({"i": 2, "m": 6}, default_width=4)
    assert metrics.text_width("mix") == 12

    strict = TableMetrics({"i": 2})
    with pytest.raises(MissingGlyphError) as excinfo:
        strict.glyph_width("z")
    assert excinfo.value.glyph == "z"


def test_bdf_metrics_parse_advances(tmp_path: Path):
    """BDF fonts report per-glyph DWIDTH advances and their line height."""
    font_path = tmp_path / "panel.bdf"
    write_minimal_bdf(font_path, {"a": 5, "b": 4, " ": 3})

    metrics = BDFFontMetrics.from_path(font_path)

    assert metrics.glyph_width("a") == 5
    assert metrics.glyph_width("b") == 4
    assert metrics.glyph_width(" ") == 3
    assert metrics.height == 9
    assert metrics.baseline == 7
    assert metrics.name == "panel.bdf"


def test_bdf_metrics_missing_glyph_falls_back(tmp_path: Path):
    plain = tmp_path / "plain.bdf"
    write_minimal_bdf(plain, {"a": 5, "m": 12})
    assert BDFFontMetrics.from_path(plain).glyph_width("z") == 12

    with_replacement = tmp_path / "replacement.bdf"
    write_minimal_bdf(with_replacement, {"a": 5, "\ufffd": 7})
    assert BDFFontMetrics.from_path(with_replacement).glyph_width("z") == 7


def _bdf_lines(*lines: str) -> list[bytes]:
    return [line.encode("ascii") for line in lines]


def test_bdf_metrics_without_ascent_uses_glyph_boxes():
    lines = _bdf_lines(
        "STARTFONT 2.1",
        "FONT -test-Tiny",
        "SIZE 6 75 75",
        "FONTBOUNDINGBOX 4 6 0 -1",
        "CHARS 1",
        "STARTCHAR A",
        "ENCODING 65",
        "SWIDTH 500 0",
        "DWIDTH 4 0",
        "BBX 4 6 0 -1",
        "BITMAP",
        "60",
        "90",
        "F0",
        "90",
        "90",
        "00",
        "ENDCHAR",
        "ENDFONT",
    )
    metrics = parse_bdf(lines, name="tiny")
    assert metrics.ascent == 5
    assert metrics.descent == 1
    assert metrics.height == 6
    assert metrics.glyph_width("A") == 4


def test_bdf_metrics_errors(tmp_path: Path):
    with pytest.raises(FontLoadError):
        BDFFontMetrics.from_path(tmp_path / "missing.bdf")
    with pytest.raises(FontLoadError):
        parse_bdf(_bdf_lines("not a font"))
    with pytest.raises(FontLoadError):
        parse_bdf(_bdf_lines("STARTFONT 2.1", "CHARS 0", "ENDFONT"))
    with pytest.raises(FontLoadError):
        parse_bdf(_bdf_lines("STARTFONT 2.1", "FONT -test-Tiny", "SIZE 6 75 75"))


def test_bdf_glyph_without_advance_is_rejected(tmp_path: Path):
    """Every glyph must carry its own DWIDTH."""
    font_path = tmp_path / "no-dwidth.bdf"
    font_path.write_text(
        "\n".join(
            [
                "STARTFONT 2.1",
                "FONT -test-Tiny",
                "SIZE 6 75 75",
                "FONTBOUNDINGBOX 6 9 0 -2",
                "CHARS 1",
                "STARTCHAR a",
                "ENCODING 97",
                "SWIDTH 500 0",
                "BBX 6 1 0 0",
                "BITMAP",
                "00",
                "ENDCHAR",
                "ENDFONT",
            ]
        )
        + "\n",
        encoding="ascii",
    )
    with pytest.raises(FontLoadError, match="no-dwidth.bdf"):
        BDFFontMetrics.from_path(font_path)


def test_create_metrics_factory(tmp_path: Path):
    assert isinstance(create_metrics("fixed", glyph_width=5), FixedWidthMetrics)
    assert isinstance(create_metrics(" Table ", widths={"a": 1}), TableMetrics)
    with pytest.raises(ValueError):
        create_metrics("bdf")
    with pytest.raises(ValueError):
        create_metrics("truetype")

    font_path = tmp_path / "factory.bdf"
    write_minimal_bdf(font_path, {"a": 5})
    assert isinstance(create_metrics("bdf", path=str(font_path)), BDFFontMetrics)


def test_build_metrics_from_config():
    config = WrapConfig(
        font=FontSettings(kind="table", widths={"a": 3}, default_width=2, glyph_height=16)
    )
    metrics = build_metrics_from_config(config)
    assert isinstance(metrics, TableMetrics)
    assert metrics.glyph_width("a") == 3
    assert metrics.glyph_width("q") == 2
    assert metrics.height == 16
