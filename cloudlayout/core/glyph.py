# cloudlayout/core/glyph.py
"""
Glyph metrics extractor: render one word at one font size and rotation onto a scratch
surface sized to its rotated bounding box, then coarse-grain the alpha channel into
grid_size x grid_size blocks. A block is occupied if any pixel in it is non-transparent.
"""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from cloudlayout.core.surface import PillowSurface, RasterSurface
from cloudlayout.core.text_metrics import rotated_box_px
from cloudlayout.core.types import GlyphFootprint, LayoutConfig

_SCRATCH_FILL = "#000000"


def occupied_blocks(alpha: np.ndarray, block: int) -> tuple[tuple[int, int], ...]:
    """(bx, by) offsets of every block x block tile of alpha that holds a non-zero pixel."""
    h, w = alpha.shape
    gh = math.ceil(h / block)
    gw = math.ceil(w / block)
    padded = np.zeros((gh * block, gw * block), dtype=bool)
    padded[:h, :w] = alpha > 0
    blocks = padded.reshape(gh, block, gw, block).any(axis=(1, 3))
    by, bx = np.nonzero(blocks)
    return tuple(sorted(zip(bx.tolist(), by.tolist())))


def measure_footprint(
    text: str,
    font_size: int,
    rotation: float,
    config: LayoutConfig,
    surface_factory: Callable[[int, int], RasterSurface] = PillowSurface,
) -> GlyphFootprint:
    """Footprint of text at font_size, rotated clockwise by rotation degrees about its centre."""
    g = config.grid_size
    scratch = surface_factory(1, 1)
    try:
        text_w, text_h = scratch.measure_text(text, config.font_family, font_size, config.font_weight)
    finally:
        scratch.close()
    width, height = rotated_box_px(text_w, text_h, rotation)

    scratch = surface_factory(width, height)
    try:
        scratch.fill_text(
            text,
            width / 2,
            height / 2,
            font_family=config.font_family,
            font_size=font_size,
            fill=_SCRATCH_FILL,
            rotation=rotation,
            font_weight=config.font_weight,
        )
        alpha = scratch.read_alpha()
    finally:
        scratch.close()

    return GlyphFootprint(
        occupied=occupied_blocks(alpha, g),
        gw=math.ceil(width / g),
        gh=math.ceil(height / g),
        width=width,
        height=height,
    )


class GlyphMeasurer:
    """Callable (text, font_size, rotation) -> GlyphFootprint bound to one config and backend."""

    def __init__(
        self,
        config: LayoutConfig,
        surface_factory: Callable[[int, int], RasterSurface] = PillowSurface,
    ) -> None:
        self.config = config
        self.surface_factory = surface_factory

    def __call__(self, text: str, font_size: int, rotation: float) -> GlyphFootprint:
        return measure_footprint(text, font_size, rotation, self.config, self.surface_factory)
