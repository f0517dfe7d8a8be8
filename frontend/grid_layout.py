from __future__ import annotations

import math
from dataclasses import dataclass, replace

MIN_CARD_WIDTH = 240
MIN_CARD_HEIGHT = 150
RESERVED_CHROME_HEIGHT = 120


@dataclass(frozen=True)
class GridGeometry:
    columns: int
    rows: int


@dataclass(frozen=True)
class LayoutConstraints:
    viewport_width: int
    viewport_height: int
    min_card_width: int = MIN_CARD_WIDTH
    min_card_height: int = MIN_CARD_HEIGHT
    reserved_chrome: int = RESERVED_CHROME_HEIGHT

    def __post_init__(self) -> None:
        if self.min_card_width <= 0 or self.min_card_height <= 0:
            raise ValueError("minimum card dimensions must be positive")

    def with_viewport(self, width: int, height: int) -> "LayoutConstraints":
        return replace(self, viewport_width=int(width), viewport_height=int(height))

    @property
    def max_columns(self) -> int:
        return max(1, self.viewport_width // self.min_card_width)

    @property
    def max_rows(self) -> int:
        return max(1, (self.viewport_height - self.reserved_chrome) // self.min_card_height)


def fit(card_count: int, constraints: LayoutConstraints) -> GridGeometry:
    """Pick the narrowest grid that shows every card without vertical overflow.

    Starts from as many columns as fit the viewport width, then widens one
    column at a time while the rows still overflow the usable height. Never
    goes past one column per card, so an impossible height is accepted as
    overflow instead of looping.
    """
    if card_count <= 0:
        return GridGeometry(columns=1, rows=1)

    max_rows = constraints.max_rows
    columns = min(card_count, constraints.max_columns)
    rows = math.ceil(card_count / columns)
    while rows > max_rows and columns < card_count:
        columns += 1
        rows = math.ceil(card_count / columns)
    return GridGeometry(columns=columns, rows=rows)
