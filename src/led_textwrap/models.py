from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Union


@dataclass(slots=True, frozen=True)
class HyphenPoint:
    """An explicit hyphenation hint inside a word."""

    offset: int
    prefix_width: int
    suffix_width: int
    penalty: float


@dataclass(slots=True, frozen=True)
class Word:
    """A run of glyphs with its pixel width and optional hyphenation points."""

    text: str
    width: int
    hyphens: tuple[HyphenPoint, ...] = ()
    oversized: bool = False
    truncated: bool = False

    def hyphen_at(self, offset: int) -> HyphenPoint | None:
        for point in self.hyphens:
            if point.offset == offset:
                return point
        return None

    def fragment_width(self, start: int, end: int | None) -> int:
        """Width of glyphs ``text[start:end]``; a hyphen cut adds the hyphen glyph."""
        head = 0
        if start:
            point = self.hyphen_at(start)
            if point is None:
                raise ValueError(f"No hyphenation point at offset {start} in {self.text!r}")
            head = self.width - point.suffix_width
        if end is None:
            return self.width - head
        point = self.hyphen_at(end)
        if point is None:
            raise ValueError(f"No hyphenation point at offset {end} in {self.text!r}")
        return point.prefix_width - head

    def source(self, start: int, end: int | None, marker: str) -> str:
        """Rebuild the hinted source text for ``text[start:end]``."""
        stop = len(self.text) if end is None else end
        cuts = {point.offset for point in self.hyphens if start < point.offset < stop}
        chunks: list[str] = []
        for idx in range(start, stop):
            if idx in cuts:
                chunks.append(marker)
            chunks.append(self.text[idx])
        if end is not None:
            chunks.append(marker)
        return "".join(chunks)


@dataclass(slots=True, frozen=True)
class Glue:
    """Collapsed inter-word whitespace."""

    width: int
    stretch: float = 0.0
    shrink: float = 0.0


@dataclass(slots=True, frozen=True)
class ForcedBreak:
    """An explicit newline; every layout must break here."""

    width: int = 0


Token = Union[Word, Glue, ForcedBreak]


class Position(NamedTuple):
    """A point in the token stream, before glyph ``offset`` of token ``token``."""

    token: int
    offset: int = 0


class BreakKind(str, Enum):
    START = "start"
    GLUE = "glue"
    FORCED = "forced"
    HYPHEN = "hyphen"
    END = "end"


@dataclass(slots=True, frozen=True)
class BreakCandidate:
    """A position at which a line may legally end."""

    index: int
    position: Position
    kind: BreakKind
    penalty: float = 0.0

    @property
    def mandatory(self) -> bool:
        return self.kind is BreakKind.FORCED


@dataclass(slots=True, frozen=True)
class Line:
    """A half-open ``[start, end)`` slice of the token stream chosen by the solver."""

    start: Position
    end: Position
    natural_width: int
    badness: float
    penalty: float = 0.0
    demerit: float = 0.0

    @property
    def token_range(self) -> range:
        stop = self.end.token + (1 if self.end.offset else 0)
        return range(self.start.token, stop)

    @property
    def cost(self) -> float:
        return self.badness + self.penalty + self.demerit


@dataclass(slots=True, frozen=True)
class Layout:
    """The winning partition of a paragraph into lines."""

    lines: tuple[Line, ...] = ()
    total_cost: float = 0.0

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(slots=True, frozen=True)
class TextRun:
    """A visible word fragment placed at an absolute x position."""

    x: int
    text: str
    token_index: int


@dataclass(slots=True)
class LineRecord:
    """Renderer-ready description of one panel row."""

    row: int
    token_range: tuple[int, int]
    start: Position
    end: Position
    text: str
    source: str
    pixel_width: int
    x_offset: int
    glue_spacing: tuple[int, ...] = ()
    runs: tuple[TextRun, ...] = field(default_factory=tuple)
    overfull: bool = False
    truncated: bool = False
