# tests/test_spiral.py
"""
Spiral placement search: font size mapping, ring generation and caching, first-fit
acceptance, shrink-to-fit loop and its attempt budget.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from cloudlayout.core.grid import OccupancyGrid
from cloudlayout.core.spiral import (
    SpiralCache,
    choose_rotation,
    find_position,
    font_size_for_weight,
    next_shrink_size,
    place_item,
)
from cloudlayout.core.types import GlyphFootprint, LayoutConfig, WordItem


def _block_measure(gw: int, gh: int, cell: int, sizes: list[int] | None = None):
    """Fake measurer: solid gw x gh block regardless of text/size; records requested sizes."""
    def measure(text: str, font_size: int, rotation: float) -> GlyphFootprint:
        if sizes is not None:
            sizes.append(font_size)
        occupied = tuple((x, y) for x in range(gw) for y in range(gh))
        return GlyphFootprint(occupied=occupied, gw=gw, gh=gh, width=gw * cell, height=gh * cell)
    return measure


def test_font_size_linear_in_weight() -> None:
    assert font_size_for_weight(10, 10, 12, 100) == 100
    assert font_size_for_weight(5, 10, 12, 100) == 50
    assert font_size_for_weight(3.3, 10, 12, 100) == 33


def test_font_size_clamped_to_min() -> None:
    assert font_size_for_weight(1, 100, 12, 100) == 12


def test_font_size_monotonic() -> None:
    sizes = [font_size_for_weight(w, 50, 10, 80) for w in (50, 40, 25, 10, 2, 1)]
    assert sizes == sorted(sizes, reverse=True)


def test_next_shrink_size() -> None:
    assert next_shrink_size(100, 12) == 70
    assert next_shrink_size(15, 12) == 12
    assert next_shrink_size(13, 12) == 12


def test_ring_zero_is_centre() -> None:
    cache = SpiralCache((12.5, 7.0), 20)
    ring = cache.ring(0)
    assert ring.shape == (1, 2)
    assert tuple(ring[0]) == (12.5, 7.0)


def test_ring_sizes_and_radius() -> None:
    cache = SpiralCache((0.0, 0.0), 10)
    for d in (1, 2, 5):
        ring = cache.ring(d)
        assert len(ring) == 8 * d
        radii = np.hypot(ring[:, 0], ring[:, 1])
        assert np.allclose(radii, d)
    # first point of each ring lies at angle 0
    assert tuple(cache.ring(3)[0]) == pytest.approx((3.0, 0.0))


def test_rings_are_cached() -> None:
    cache = SpiralCache((5.0, 5.0), 10)
    a = cache.ring(4)
    b = cache.ring(4)
    assert a is b
    assert cache.cached_rings == 1


def test_find_position_prefers_centre() -> None:
    grid = OccupancyGrid.initialize(100, 100, 10)
    cache = SpiralCache((grid.ngx / 2, grid.ngy / 2), 10)
    fp = _block_measure(2, 2, 10)("x", 12, 0)
    assert find_position(fp, grid, cache) == (4, 4)


def test_find_position_moves_outward_when_centre_taken() -> None:
    grid = OccupancyGrid.initialize(100, 100, 10)
    grid.occupy([(4, 4), (5, 4), (4, 5), (5, 5)])
    cache = SpiralCache((grid.ngx / 2, grid.ngy / 2), 10)
    fp = _block_measure(2, 2, 10)("x", 12, 0)
    gx, gy = find_position(fp, grid, cache)
    assert grid.can_fit(gx, gy, fp.occupied)
    assert math.hypot(gx + 1 - 5, gy + 1 - 5) <= 3


def test_place_item_occupies_grid_and_centres() -> None:
    config = LayoutConfig(width=100, height=100, grid_size=10, rotate=False)
    grid = OccupancyGrid.initialize(100, 100, 10)
    cache = SpiralCache((5.0, 5.0), 10)
    rng = np.random.default_rng(0)
    placed = place_item(WordItem("hi", 1.0, "#000000"), grid, 20, cache, _block_measure(2, 2, 10), rng, config)
    assert placed is not None
    assert placed.center == (50.0, 50.0)
    assert placed.top_left == (40.0, 40.0)
    assert placed.size == (20.0, 20.0)
    assert placed.color == "#000000"
    assert set(placed.cells) == {(4, 4), (5, 4), (4, 5), (5, 5)}
    for gx, gy in placed.cells:
        assert grid.query(gx, gy) is False


def test_shrink_loop_sizes_and_drop() -> None:
    # Single-cell grid, two-cell footprint: never fits; sizes shrink geometrically to min
    config = LayoutConfig(width=10, height=10, grid_size=10, min_font_size=12, max_font_size=100)
    grid = OccupancyGrid.initialize(10, 10, 10)
    cache = SpiralCache((0.5, 0.5), 1)
    sizes: list[int] = []
    rng = np.random.default_rng(0)
    placed = place_item(WordItem("big", 1.0), grid, 100, cache, _block_measure(2, 1, 10, sizes), rng, config)
    assert placed is None
    assert sizes == [100, 70, 49, 34, 23, 16, 12]
    assert grid.free_count == 1


def test_shrink_budget_limits_retries() -> None:
    config = LayoutConfig(width=10, height=10, grid_size=10, max_shrink_attempts=2)
    grid = OccupancyGrid.initialize(10, 10, 10)
    cache = SpiralCache((0.5, 0.5), 1)
    sizes: list[int] = []
    placed = place_item(WordItem("big", 1.0), grid, 100, cache, _block_measure(2, 1, 10, sizes), np.random.default_rng(0), config)
    assert placed is None
    assert sizes == [100, 70, 49]


def test_no_shrink_single_attempt() -> None:
    config = LayoutConfig(width=10, height=10, grid_size=10, shrink_to_fit=False)
    grid = OccupancyGrid.initialize(10, 10, 10)
    sizes: list[int] = []
    place_item(WordItem("big", 1.0), grid, 100, SpiralCache((0.5, 0.5), 1), _block_measure(2, 1, 10, sizes), np.random.default_rng(0), config)
    assert sizes == [100]


def test_choose_rotation_respects_config() -> None:
    rng = np.random.default_rng(3)
    off = LayoutConfig(rotate=False, rotate_angles=(0, 90))
    assert choose_rotation(off, rng) == 0.0
    on = LayoutConfig(rotate=True, rotate_angles=(0, 45, 90))
    draws = {choose_rotation(on, rng) for _ in range(50)}
    assert draws <= {0.0, 45.0, 90.0}
    assert len(draws) > 1
