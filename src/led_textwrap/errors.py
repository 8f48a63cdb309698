from __future__ import annotations


class LayoutError(RuntimeError):
    """Base class for failures raised while laying out a paragraph."""


class InvalidInputError(LayoutError):
    """Raised when paragraph text contains characters the tokenizer rejects."""

    def __init__(self, message: str, index: int) -> None:
        super().__init__(message)
        self.index = index


class UnbreakableError(LayoutError):
    """Raised when no admissible layout fits within the row budget."""

    def __init__(self, message: str, max_lines: int | None) -> None:
        super().__init__(message)
        self.max_lines = max_lines


class OversizedTokenError(LayoutError):
    """Raised when a word is wider than the panel and the policy forbids overflow."""

    def __init__(self, word: str, width: int, target_width: int) -> None:
        super().__init__(
            f"Word {word!r} is {width}px wide and cannot fit a {target_width}px panel"
        )
        self.word = word
        self.width = width
        self.target_width = target_width


class MissingGlyphError(LayoutError):
    """Raised when the font has no width for a glyph the text needs."""

    def __init__(self, glyph: str) -> None:
        super().__init__(f"No width known for glyph {glyph!r}")
        self.glyph = glyph


class FontLoadError(RuntimeError):
    """Raised when a font file cannot be read or parsed."""
