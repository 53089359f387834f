# cloudlayout/core/layout.py
"""
Layout pass orchestration: build the occupancy grid (free, or free only under the mask),
sort words by descending weight, place each with the spiral search, draw accepted words.
Heaviest-first ordering lets the largest words claim the central positions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

import numpy as np

from cloudlayout.core.fonts import FontReadySignal
from cloudlayout.core.glyph import GlyphMeasurer
from cloudlayout.core.grid import OccupancyGrid
from cloudlayout.core.mask import rasterize_mask
from cloudlayout.core.render import draw_placed_item
from cloudlayout.core.spiral import Measure, SpiralCache, font_size_for_weight, place_item
from cloudlayout.core.surface import PillowSurface, RasterSurface
from cloudlayout.core.types import LayoutConfig, LayoutSummary, MaskData, PlacedItem, WordItem

logger = logging.getLogger(__name__)


@dataclass
class LayoutPass:
    """Everything one pass produces. Replaced wholesale on every re-layout."""
    summary: LayoutSummary
    grid: OccupancyGrid
    eligible: np.ndarray
    mask: MaskData | None


def order_words_by_weight(words: Sequence[WordItem]) -> list[WordItem]:
    """Heaviest first; equal weights keep their input order."""
    return sorted(words, key=lambda w: -w.weight)


def build_grid(config: LayoutConfig, mask: MaskData | None = None) -> OccupancyGrid:
    if mask is None:
        return OccupancyGrid.initialize(config.width, config.height, config.grid_size, default_free=True)
    return OccupancyGrid.from_mask(config.width, config.height, config.grid_size, mask)


def run_word_layout(
    words: Sequence[WordItem],
    config: LayoutConfig,
    grid: OccupancyGrid,
    measure: Measure,
    rng: np.random.Generator,
    surface: RasterSurface | None = None,
) -> LayoutSummary:
    """
    Place words on grid in descending weight order. Words that do not fit even at
    min_font_size are dropped and reported in LayoutSummary.dropped, never raised.
    """
    if not words:
        return LayoutSummary(placed=[], n_items=0, dropped=[])

    ordered = order_words_by_weight(words)
    max_weight = max(w.weight for w in ordered)
    cache = SpiralCache((grid.ngx / 2, grid.ngy / 2), max(grid.ngx, grid.ngy))
    placed: list[PlacedItem] = []
    dropped: list[WordItem] = []

    for word in ordered:
        size = font_size_for_weight(word.weight, max_weight, config.min_font_size, config.max_font_size)
        result = place_item(word, grid, size, cache, measure, rng, config)
        if result is None:
            dropped.append(word)
            logger.debug(f"Dropped {word.text!r} (weight {word.weight:g}): no fit at {config.min_font_size}px")
            continue
        placed.append(result)
        if surface is not None:
            draw_placed_item(surface, result, config)
        if config.on_word_placed is not None:
            config.on_word_placed(word)

    if dropped:
        logger.info(f"{len(dropped)} of {len(words)} words did not fit and were dropped")
    logger.debug(f"Layout done: {len(placed)} placed, {cache.cached_rings} rings cached")
    return LayoutSummary(placed=placed, n_items=len(words), dropped=dropped)


def compute_layout(
    words: Sequence[WordItem],
    config: LayoutConfig,
    surface: RasterSurface | None = None,
    surface_factory: Callable[[int, int], RasterSurface] = PillowSurface,
    rng: np.random.Generator | None = None,
    font_ready: FontReadySignal | None = None,
    measure: Measure | None = None,
    mask: MaskData | None = None,
) -> LayoutPass:
    """
    Full pass: rasterize the configured mask (unless one is given), build the grid, place words.
    rng defaults to np.random.default_rng(config.seed); measure defaults to a GlyphMeasurer.
    """
    if mask is None and config.mask_shape:
        mask = rasterize_mask(
            config.mask_shape,
            config.mask_size,
            surface_factory=surface_factory,
            font_family=config.mask_font_family or config.font_family,
            font_ready=font_ready,
        )
    grid = build_grid(config, mask)
    eligible = grid.snapshot()
    if rng is None:
        rng = np.random.default_rng(config.seed)
    if measure is None:
        measure = GlyphMeasurer(config, surface_factory)
    summary = run_word_layout(words, config, grid, measure, rng, surface=surface)
    return LayoutPass(summary=summary, grid=grid, eligible=eligible, mask=mask)
