from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import List, TypedDict

import typer
import yaml

from .config import Alignment, OverflowPolicy, WrapConfig, load_config
from .errors import FontLoadError, LayoutError
from .metrics import build_metrics_from_config
from .models import LineRecord
from .pipeline import WrapResult, wrap_paragraphs

app = typer.Typer(help="Optimal-fit text wrapping for LED matrix panels.", no_args_is_help=True)

PARAGRAPH_SPLIT_RE = re.compile(r"\n[ \t]*\n")


class RunPayload(TypedDict):
    x: int
    text: str


class LinePayload(TypedDict):
    row: int
    text: str
    token_range: List[int]
    pixel_width: int
    x_offset: int
    glue_spacing: List[int]
    runs: List[RunPayload]
    overfull: bool
    truncated: bool


class ParagraphPayload(TypedDict):
    text: str
    total_cost: float
    lines: List[LinePayload]


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)."
    ),
) -> None:
    """Configure logging before any command runs."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(
            f"Unknown log level '{log_level}'.", param_hint="--log-level"
        )
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command()
def wrap(
    text: str | None = typer.Option(None, "--text", "-t", help="Text to wrap."),
    input_path: Path | None = typer.Option(
        None,
        "--input-path",
        exists=True,
        readable=True,
        dir_okay=False,
        file_okay=True,
        help="UTF-8 text file; blank lines separate paragraphs.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        readable=True,
        dir_okay=False,
        help="YAML configuration file.",
    ),
    width: int | None = typer.Option(None, "--width", help="Panel width in pixels."),
    max_lines: int | None = typer.Option(None, "--max-lines", help="Row budget."),
    alignment: Alignment | None = typer.Option(None, "--alignment"),
    overflow_policy: OverflowPolicy | None = typer.Option(None, "--overflow-policy"),
    font: Path | None = typer.Option(
        None, "--font", exists=True, dir_okay=False, help="BDF font to measure glyphs with."
    ),
    glyph_width: int | None = typer.Option(
        None, "--glyph-width", help="Use a fixed-width font of this many pixels."
    ),
    kerning_offset: int | None = typer.Option(
        None, "--kerning-offset", help="Extra pixels after every glyph."
    ),
    preview: bool = typer.Option(
        False, "--preview", help="Print a row-by-row preview instead of JSON."
    ),
) -> None:
    """Wrap text onto the panel and emit the positioned line records."""
    if (text is None) == (input_path is None):
        raise typer.BadParameter("Provide exactly one of --text or --input-path.")
    try:
        cfg = load_config(config)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _apply_overrides(
        cfg,
        width,
        max_lines,
        alignment,
        overflow_policy,
        font,
        glyph_width,
        kerning_offset,
    )
    if text is None:
        assert input_path is not None
        text = input_path.read_text(encoding="utf-8")
    paragraphs = _split_paragraphs(text)

    try:
        metrics = build_metrics_from_config(cfg)
        results = wrap_paragraphs(paragraphs, metrics, cfg)
    except (LayoutError, FontLoadError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if preview:
        for idx, result in enumerate(results):
            if idx:
                typer.echo("")
            typer.echo(_format_preview(result, cfg.target_width_px))
        return
    payload = {"paragraphs": [_paragraph_dict(result) for result in results]}
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command("print-config")
def print_config() -> None:
    """Print the default configuration as YAML."""
    cfg = WrapConfig()
    typer.echo(yaml.safe_dump(cfg.to_dict(), sort_keys=False, allow_unicode=False))


def main() -> None:
    app()


def _apply_overrides(
    config: WrapConfig,
    width: int | None,
    max_lines: int | None,
    alignment: Alignment | None,
    overflow_policy: OverflowPolicy | None,
    font: Path | None,
    glyph_width: int | None,
    kerning_offset: int | None,
) -> None:
    """Apply CLI overrides to the loaded configuration when provided."""
    if width is not None:
        if width <= 0:
            raise typer.BadParameter("--width must be positive.")
        config.target_width_px = width
    if max_lines is not None:
        if max_lines < 1:
            raise typer.BadParameter("--max-lines must be at least 1.")
        config.max_lines = max_lines
    if alignment is not None:
        config.alignment = alignment
    if overflow_policy is not None:
        config.overflow_policy = overflow_policy
    font_settings = config.font
    if font is not None:
        font_settings.kind = "bdf"
        font_settings.path = str(font)
    elif glyph_width is not None:
        font_settings.kind = "fixed"
        font_settings.glyph_width = glyph_width
    if kerning_offset is not None:
        font_settings.kerning_offset = kerning_offset


def _split_paragraphs(raw: str) -> List[str]:
    stripped = raw.strip()
    if not stripped:
        return [""]
    return [part.strip() for part in PARAGRAPH_SPLIT_RE.split(stripped)]


def _paragraph_dict(result: WrapResult) -> ParagraphPayload:
    return {
        "text": result.text,
        "total_cost": result.layout.total_cost,
        "lines": [_line_dict(line) for line in result.lines],
    }


def _line_dict(line: LineRecord) -> LinePayload:
    return {
        "row": line.row,
        "text": line.text,
        "token_range": list(line.token_range),
        "pixel_width": line.pixel_width,
        "x_offset": line.x_offset,
        "glue_spacing": list(line.glue_spacing),
        "runs": [{"x": run.x, "text": run.text} for run in line.runs],
        "overfull": line.overfull,
        "truncated": line.truncated,
    }


def _format_preview(result: WrapResult, target_width: int) -> str:
    if not result.lines:
        return "(empty)"
    rows = []
    for line in result.lines:
        flag = " overfull" if line.overfull else (" truncated" if line.truncated else "")
        rows.append(
            f"[{line.row:>2}] x={line.x_offset:>3} w={line.pixel_width:>3}/{target_width} "
            f"|{line.text}|{flag}"
        )
    return "\n".join(rows)


if __name__ == "__main__":
    main()
