from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, NamedTuple, Sequence

from .breaks import consecutive_hyphens
from .models import BreakCandidate, Glue, Position, Token, Word

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from .config import WrapConfig


class LineItem(NamedTuple):
    """A visible piece of a line: a word fragment or an interior glue."""

    index: int
    token: Token
    start: int
    end: int | None
    width: int


class LineCost(NamedTuple):
    badness: float
    penalty: float
    demerit: float

    @property
    def total(self) -> float:
        return self.badness + self.penalty + self.demerit


def line_items(tokens: Sequence[Token], start: Position, end: Position) -> List[LineItem]:
    """Collect the words and interior glue between two positions.

    Glue at either edge of the line collapses, as do forced breaks.
    """
    items: List[LineItem] = []
    stop = end.token + (1 if end.offset else 0)
    for idx in range(start.token, stop):
        token = tokens[idx]
        if isinstance(token, Word):
            lo = start.offset if idx == start.token else 0
            hi = end.offset if (idx == end.token and end.offset) else None
            items.append(LineItem(idx, token, lo, hi, token.fragment_width(lo, hi)))
        elif isinstance(token, Glue):
            items.append(LineItem(idx, token, 0, None, token.width))
    while items and not isinstance(items[0].token, Word):
        items.pop(0)
    while items and not isinstance(items[-1].token, Word):
        items.pop()
    return items


def measure_line(tokens: Sequence[Token], start: Position, end: Position) -> int:
    """Natural width of the line between two positions, edge glue excluded."""
    return sum(item.width for item in line_items(tokens, start, end))


def holds_single_oversized_word(items: Sequence[LineItem]) -> bool:
    return (
        len(items) == 1
        and isinstance(items[0].token, Word)
        and items[0].token.oversized
    )


@dataclass(slots=True, frozen=True)
class CostModel:
    """Scores candidate lines; lower is better, zero is a perfect fit."""

    stretch_weight: float = 10.0
    overfull_base: float = 1_000_000.0
    consecutive_hyphen_demerit: float = 200.0

    def __post_init__(self) -> None:
        if min(self.stretch_weight, self.overfull_base, self.consecutive_hyphen_demerit) < 0:
            raise ValueError("Cost weights must not be negative.")

    @classmethod
    def from_config(cls, config: "WrapConfig") -> "CostModel":
        return cls(
            stretch_weight=config.stretch_weight,
            overfull_base=config.overfull_base,
            consecutive_hyphen_demerit=config.consecutive_hyphen_demerit,
        )

    def badness(self, natural_width: float, target_width: float, *, terminal: bool) -> float:
        """
        Badness of a line ``natural_width`` pixels wide on a ``target_width`` panel.

        Overfull lines cost ``overfull_base`` plus the squared overflow. The
        last line of a paragraph and lines closed by a forced break may be
        ragged for free. Other lines pay the cube of their weighted unused
        fraction.
        """
        if natural_width > target_width:
            return self.overfull_base + float(natural_width - target_width) ** 2
        if terminal or natural_width == target_width:
            return 0.0
        ratio = natural_width / target_width
        return ((1.0 - ratio) * self.stretch_weight) ** 3

    def line_cost(
        self,
        previous: BreakCandidate,
        current: BreakCandidate,
        natural_width: float,
        target_width: float,
        *,
        terminal: bool,
    ) -> LineCost:
        demerit = (
            self.consecutive_hyphen_demerit
            if consecutive_hyphens(previous, current)
            else 0.0
        )
        return LineCost(
            self.badness(natural_width, target_width, terminal=terminal),
            current.penalty,
            demerit,
        )
