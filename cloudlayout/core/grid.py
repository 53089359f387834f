# cloudlayout/core/grid.py
"""
Occupancy grid: coarse boolean index over the output surface, True = free for placement.
Indexed [gx, gy]; cells outside [0, ngx) x [0, ngy) never fit.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

import numpy as np

from cloudlayout.core.config import MASK_FIT_RATIO
from cloudlayout.core.types import MaskData

logger = logging.getLogger(__name__)


def mask_transform(
    surface_w: int,
    surface_h: int,
    mask_w: int,
    mask_h: int,
    fit_ratio: float = MASK_FIT_RATIO,
) -> tuple[float, float, float]:
    """Uniform scale and centring offset mapping mask pixels onto the surface: (scale, off_x, off_y)."""
    scale = min(surface_w / mask_w, surface_h / mask_h) * fit_ratio
    off_x = (surface_w - mask_w * scale) / 2
    off_y = (surface_h - mask_h * scale) / 2
    return (scale, off_x, off_y)


class OccupancyGrid:
    """ngx x ngy boolean grid of cell_size px cells."""

    def __init__(self, cells: np.ndarray, cell_size: int) -> None:
        if cells.ndim != 2:
            raise ValueError("Grid cells must be a 2D array")
        self._cells = cells.astype(bool, copy=True)
        self.cell_size = int(cell_size)

    @classmethod
    def initialize(cls, width: int, height: int, cell_size: int, default_free: bool = True) -> OccupancyGrid:
        ngx = math.ceil(width / cell_size)
        ngy = math.ceil(height / cell_size)
        cells = np.full((ngx, ngy), bool(default_free), dtype=bool)
        return cls(cells, cell_size)

    @classmethod
    def from_mask(
        cls,
        width: int,
        height: int,
        cell_size: int,
        mask: MaskData,
        fit_ratio: float = MASK_FIT_RATIO,
    ) -> OccupancyGrid:
        """Start fully occupied, then free every cell a scaled, centred mask pixel lands in."""
        grid = cls.initialize(width, height, cell_size, default_free=False)
        if mask.is_empty:
            return grid
        scale, off_x, off_y = mask_transform(width, height, mask.width, mask.height, fit_ratio)
        pts = np.array(sorted(mask.pixels), dtype=np.float64)
        sx = np.floor(pts[:, 0] * scale + off_x)
        sy = np.floor(pts[:, 1] * scale + off_y)
        gx = np.floor(sx / cell_size).astype(np.int64)
        gy = np.floor(sy / cell_size).astype(np.int64)
        inside = (gx >= 0) & (gx < grid.ngx) & (gy >= 0) & (gy < grid.ngy)
        grid._cells[gx[inside], gy[inside]] = True
        logger.debug(
            f"Mask projected: scale={scale:.3f}, offset=({off_x:.1f}, {off_y:.1f}), "
            f"{grid.free_count}/{grid.ngx * grid.ngy} cells eligible"
        )
        return grid

    @property
    def ngx(self) -> int:
        return int(self._cells.shape[0])

    @property
    def ngy(self) -> int:
        return int(self._cells.shape[1])

    @property
    def free_count(self) -> int:
        return int(self._cells.sum())

    def in_bounds(self, gx: int, gy: int) -> bool:
        return 0 <= gx < self.ngx and 0 <= gy < self.ngy

    def query(self, gx: int, gy: int) -> bool:
        """True if the cell exists and is free."""
        if not self.in_bounds(gx, gy):
            return False
        return bool(self._cells[gx, gy])

    def can_fit(self, gx: int, gy: int, offsets: Sequence[tuple[int, int]]) -> bool:
        """True if every offset, anchored at (gx, gy), lands on an in-bounds free cell."""
        for ox, oy in offsets:
            if not self.query(gx + ox, gy + oy):
                return False
        return True

    def fits_many(self, anchors: np.ndarray, offsets: np.ndarray) -> np.ndarray:
        """
        Vectorized can_fit: anchors (N, 2) int, offsets (K, 2) int -> (N,) bool.
        Row i is True iff every offset anchored at anchors[i] is an in-bounds free cell.
        """
        if len(anchors) == 0:
            return np.zeros(0, dtype=bool)
        if len(offsets) == 0:
            return np.ones(len(anchors), dtype=bool)
        xs = anchors[:, 0:1] + offsets[None, :, 0]
        ys = anchors[:, 1:2] + offsets[None, :, 1]
        inside = (xs >= 0) & (xs < self.ngx) & (ys >= 0) & (ys < self.ngy)
        free = np.zeros(xs.shape, dtype=bool)
        free[inside] = self._cells[xs[inside], ys[inside]]
        return free.all(axis=1)

    def occupy(self, cells: Iterable[tuple[int, int]]) -> None:
        """Mark cells occupied. All-or-nothing: any bad cell raises and leaves the grid unchanged."""
        cells = list(cells)
        for gx, gy in cells:
            if not self.query(gx, gy):
                raise ValueError(f"Cell ({gx}, {gy}) is out of bounds or already occupied")
        for gx, gy in cells:
            self._cells[gx, gy] = False

    def snapshot(self) -> np.ndarray:
        """Copy of the free/occupied array, shape (ngx, ngy)."""
        return self._cells.copy()
