# cloudlayout/core/spiral.py
"""
Spiral placement search. Candidate anchors come in concentric rings around the grid centre
(ring 0 = centre, ring d = 8d points evenly spaced by angle); the first anchor where the
glyph footprint fits wins. If none fits, the font shrinks by SHRINK_FACTOR and the search
repeats, down to min_font_size.

The draw centre is the footprint's cell-aligned centre, ((gx + gw/2) g, (gy + gh/2) g), not
gx g + width/2, so rendered ink can sit up to half a cell off its footprint. Disjointness
holds for footprint cells only.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np

from cloudlayout.core.config import SHRINK_FACTOR, SPIRAL_POINTS_PER_RING
from cloudlayout.core.grid import OccupancyGrid
from cloudlayout.core.types import GlyphFootprint, LayoutConfig, PlacedItem, WordItem

logger = logging.getLogger(__name__)

Measure = Callable[[str, int, float], GlyphFootprint]


def font_size_for_weight(
    weight: float,
    max_weight: float,
    min_font_size: int,
    max_font_size: int,
) -> int:
    """weight / max_weight * max_font_size, clamped to min_font_size, floored."""
    if max_weight <= 0:
        raise ValueError(f"max_weight must be > 0, got {max_weight}")
    size = weight / max_weight * max_font_size
    if size < min_font_size:
        size = min_font_size
    return int(math.floor(size))


def next_shrink_size(font_size: int, min_font_size: int, factor: float = SHRINK_FACTOR) -> int:
    return max(int(math.floor(font_size * factor)), min_font_size)


class SpiralCache:
    """Ring distance -> candidate points (x, y) in grid units, built lazily and reused across words."""

    def __init__(self, center: tuple[float, float], max_radius: int) -> None:
        self.center = center
        self.max_radius = int(max_radius)
        self._rings: dict[int, np.ndarray] = {}

    def ring(self, distance: int) -> np.ndarray:
        """(n, 2) float array; n = 1 for distance 0, else SPIRAL_POINTS_PER_RING * distance."""
        if distance < 0:
            raise ValueError("Ring distance must be >= 0")
        cached = self._rings.get(distance)
        if cached is not None:
            return cached
        cx, cy = self.center
        if distance == 0:
            pts = np.array([[cx, cy]], dtype=np.float64)
        else:
            n = SPIRAL_POINTS_PER_RING * distance
            angles = np.arange(n) / n * 2 * math.pi
            pts = np.column_stack((cx + distance * np.cos(angles), cy + distance * np.sin(angles)))
        self._rings[distance] = pts
        return pts

    @property
    def cached_rings(self) -> int:
        return len(self._rings)


def choose_rotation(config: LayoutConfig, rng: np.random.Generator) -> float:
    if config.rotate and config.rotate_angles:
        return float(config.rotate_angles[int(rng.integers(len(config.rotate_angles)))])
    return 0.0


def choose_color(item: WordItem, config: LayoutConfig, rng: np.random.Generator) -> str:
    if item.color:
        return item.color
    return config.colors[int(rng.integers(len(config.colors)))]


def find_position(
    footprint: GlyphFootprint,
    grid: OccupancyGrid,
    cache: SpiralCache,
) -> tuple[int, int] | None:
    """
    Top-left grid cell of the first fitting candidate, scanning rings outward and points
    within a ring in generation order. None when every ring is exhausted.
    """
    offsets = np.array(footprint.occupied, dtype=np.int64).reshape(-1, 2)
    half = np.array([footprint.gw / 2, footprint.gh / 2])
    for distance in range(cache.max_radius + 1):
        anchors = np.floor(cache.ring(distance) - half).astype(np.int64)
        fits = grid.fits_many(anchors, offsets)
        hits = np.flatnonzero(fits)
        if hits.size:
            gx, gy = anchors[hits[0]]
            return (int(gx), int(gy))
    return None


def place_item(
    item: WordItem,
    grid: OccupancyGrid,
    font_size: int,
    cache: SpiralCache,
    measure: Measure,
    rng: np.random.Generator,
    config: LayoutConfig,
) -> PlacedItem | None:
    """
    Place one word, shrinking on failure. On success the grid cells are occupied and a
    PlacedItem returned; None means the word did not fit even at min_font_size.
    """
    size = int(font_size)
    shrinks = 0
    rotation = choose_rotation(config, rng)
    while True:
        footprint = measure(item.text, size, rotation)
        if not footprint.occupied:
            logger.debug(f"{item.text!r} renders no pixels at {size}px; dropping")
            return None

        anchor = find_position(footprint, grid, cache)
        if anchor is not None:
            gx, gy = anchor
            cells = tuple((gx + ox, gy + oy) for ox, oy in footprint.occupied)
            grid.occupy(cells)
            g = grid.cell_size
            cx = (gx + footprint.gw / 2) * g
            cy = (gy + footprint.gh / 2) * g
            return PlacedItem(
                text=item.text,
                weight=item.weight,
                x=cx - footprint.width / 2,
                y=cy - footprint.height / 2,
                width=float(footprint.width),
                height=float(footprint.height),
                center_x=cx,
                center_y=cy,
                font_size=size,
                color=choose_color(item, config, rng),
                rotation=rotation,
                cells=cells,
            )

        if not config.shrink_to_fit or size <= config.min_font_size:
            return None
        if config.max_shrink_attempts is not None and shrinks >= config.max_shrink_attempts:
            logger.debug(f"{item.text!r}: shrink budget ({config.max_shrink_attempts}) exhausted at {size}px")
            return None
        next_size = next_shrink_size(size, config.min_font_size)
        logger.debug(f"{item.text!r}: no fit at {size}px, retrying at {next_size}px")
        size = next_size
        shrinks += 1
