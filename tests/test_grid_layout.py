from __future__ import annotations

import math

import pytest

from frontend.grid_layout import GridGeometry, LayoutConstraints, fit


def test_five_cards_on_a_laptop_screen() -> None:
    constraints = LayoutConstraints(viewport_width=1000, viewport_height=700)
    assert constraints.max_columns == 4
    assert constraints.max_rows == 3
    assert fit(5, constraints) == GridGeometry(columns=4, rows=2)


def test_widens_until_rows_fit() -> None:
    # 2 columns and 2 rows fit; 12 cards need widening to 6 columns
    constraints = LayoutConstraints(viewport_width=500, viewport_height=420)
    assert fit(12, constraints) == GridGeometry(columns=6, rows=2)


def test_accepts_overflow_when_height_can_never_fit() -> None:
    constraints = LayoutConstraints(viewport_width=240, viewport_height=0)
    assert fit(7, constraints) == GridGeometry(columns=7, rows=1)


def test_degenerate_viewport_clamps_to_one() -> None:
    constraints = LayoutConstraints(viewport_width=-10, viewport_height=-500)
    assert constraints.max_columns == 1
    assert constraints.max_rows == 1
    assert fit(1, constraints) == GridGeometry(columns=1, rows=1)


def test_no_cards_yields_single_cell() -> None:
    assert fit(0, LayoutConstraints(viewport_width=1920, viewport_height=1080)) == GridGeometry(1, 1)


def test_rejects_non_positive_card_size() -> None:
    with pytest.raises(ValueError):
        LayoutConstraints(viewport_width=800, viewport_height=600, min_card_width=0)


@pytest.mark.parametrize("width", [0, 239, 240, 800, 1366, 1920, 3840])
@pytest.mark.parametrize("height", [0, 270, 700, 1080, 2160])
@pytest.mark.parametrize("cards", [1, 2, 5, 12, 31])
def test_fit_invariants(width: int, height: int, cards: int) -> None:
    constraints = LayoutConstraints(viewport_width=width, viewport_height=height)
    geometry = fit(cards, constraints)

    assert geometry.columns >= 1
    assert geometry.rows >= 1
    assert geometry.columns * geometry.rows >= cards
    assert geometry.columns <= max(1, cards)
    assert geometry.rows == math.ceil(cards / geometry.columns)
    if math.ceil(cards / min(cards, constraints.max_columns)) <= constraints.max_rows:
        # no widening needed, so the width limit holds
        assert geometry.columns <= constraints.max_columns


def test_with_viewport_keeps_card_minimums() -> None:
    base = LayoutConstraints(viewport_width=100, viewport_height=100, min_card_width=300, reserved_chrome=0)
    resized = base.with_viewport(1200, 900)
    assert resized.min_card_width == 300
    assert resized.reserved_chrome == 0
    assert resized.max_columns == 4


def test_fit_is_idempotent() -> None:
    constraints = LayoutConstraints(viewport_width=1366, viewport_height=768)
    assert fit(9, constraints) == fit(9, constraints)
