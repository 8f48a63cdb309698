from __future__ import annotations

import re
import unicodedata
from typing import Callable, Dict, List

from .config import SOFT_HYPHEN
from .errors import InvalidInputError
from .models import ForcedBreak, Glue, HyphenPoint, Token, Word

GlyphWidth = Callable[[str], int]

SPACE_RE = re.compile(r"[ \t]+")
NEWLINE_RE = re.compile(r"\r\n|\r|\n")
ALLOWED_CONTROLS = frozenset("\n\r\t")


def tokenize_paragraph(
    text: str,
    glyph_width: GlyphWidth,
    *,
    kerning_offset: int = 0,
    hyphen_marker: str = SOFT_HYPHEN,
    hyphen_glyph: str = "-",
    hyphenation_penalty: float = 50.0,
    glue_stretch_ratio: float = 1.0,
    glue_shrink_ratio: float = 0.33,
) -> tuple[Token, ...]:
    """
    Split paragraph text into words, collapsed glue and forced breaks.

    Runs of spaces and tabs become one ``Glue``; each newline becomes a
    ``ForcedBreak``. Whitespace next to a newline or at the paragraph edges is
    dropped. ``hyphen_marker`` characters inside a word record hyphenation
    points and never render themselves. The space and hyphen glyphs are
    measured only when glue or a hyphenation point needs them.
    """
    _validate(text)

    def advance(glyph: str) -> int:
        return glyph_width(glyph) + kerning_offset

    measured: Dict[str, int] = {}

    def run_width(run: str) -> int:
        if run not in measured:
            measured[run] = sum(advance(glyph) for glyph in run)
        return measured[run]

    tokens: List[Token] = []

    for line_no, line in enumerate(NEWLINE_RE.split(text)):
        if line_no:
            tokens.append(ForcedBreak())
        words = [
            part
            for part in SPACE_RE.split(line)
            if part.replace(hyphen_marker, "")
        ]
        for word_no, raw in enumerate(words):
            if word_no:
                space_width = run_width(" ")
                tokens.append(
                    Glue(
                        width=space_width,
                        stretch=space_width * glue_stretch_ratio,
                        shrink=space_width * glue_shrink_ratio,
                    )
                )
            tokens.append(
                _build_word(
                    raw,
                    advance,
                    hyphen_marker,
                    lambda: run_width(hyphen_glyph),
                    hyphenation_penalty,
                )
            )

    return tuple(tokens)


def _validate(text: str) -> None:
    for idx, char in enumerate(text):
        if char not in ALLOWED_CONTROLS and unicodedata.category(char) == "Cc":
            raise InvalidInputError(
                f"Unsupported control character U+{ord(char):04X} at index {idx}", idx
            )


def _build_word(
    raw: str,
    advance: GlyphWidth,
    marker: str,
    hyphen_width: Callable[[], int],
    penalty: float,
) -> Word:
    glyphs: List[str] = []
    cut_offsets: List[int] = []
    for char in raw:
        if char == marker:
            cut_offsets.append(len(glyphs))
        else:
            glyphs.append(char)

    # cumulative[i] is the width of glyphs[:i]
    cumulative = [0]
    for glyph in glyphs:
        cumulative.append(cumulative[-1] + advance(glyph))
    width = cumulative[-1]

    hyphens: List[HyphenPoint] = []
    for offset in sorted(set(cut_offsets)):
        if 0 < offset < len(glyphs):
            hyphens.append(
                HyphenPoint(
                    offset=offset,
                    prefix_width=cumulative[offset] + hyphen_width(),
                    suffix_width=width - cumulative[offset],
                    penalty=penalty,
                )
            )
    return Word(text="".join(glyphs), width=width, hyphens=tuple(hyphens))
