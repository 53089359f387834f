"""
Post-layout checks: placement boxes inside the surface, footprints pairwise disjoint,
footprints inside the mask-eligible region. Used by the CLI for warnings and by tests.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from shapely.geometry import Polygon, box

from cloudlayout.core.error_codes import WORDS_DROPPED, user_message
from cloudlayout.core.types import LayoutConfig, LayoutSummary, PlacedItem

CONTAINMENT_TOLERANCE_PX: float = 1e-6


def placement_box(item: PlacedItem) -> Polygon:
    """Unrotated bounding box of a placement as a shapely polygon."""
    return box(item.x, item.y, item.x + item.width, item.y + item.height)


def validate_inside_surface(
    item: PlacedItem,
    width: float,
    height: float,
    tolerance_px: float = CONTAINMENT_TOLERANCE_PX,
) -> tuple[bool, float]:
    """
    True if the placement box lies inside the surface (with tolerance).
    Also returns the min clearance from the box to the surface edge (0 when not contained).
    """
    surface = box(0.0, 0.0, float(width), float(height))
    rect = placement_box(item)
    ok = surface.buffer(tolerance_px).contains(rect)
    if not ok:
        return False, 0.0
    return True, float(surface.exterior.distance(rect))


def cells_disjoint(placed: Sequence[PlacedItem]) -> bool:
    """True if no grid cell is claimed by two placements."""
    seen: set[tuple[int, int]] = set()
    for item in placed:
        for cell in item.cells:
            if cell in seen:
                return False
            seen.add(cell)
    return True


def cells_within(placed: Sequence[PlacedItem], eligible: np.ndarray) -> bool:
    """True if every claimed cell was free in the freshly initialized grid (shape (ngx, ngy))."""
    ngx, ngy = eligible.shape
    for item in placed:
        for gx, gy in item.cells:
            if not (0 <= gx < ngx and 0 <= gy < ngy) or not eligible[gx, gy]:
                return False
    return True


def layout_warnings(
    summary: LayoutSummary,
    config: LayoutConfig,
    eligible: np.ndarray | None = None,
) -> list[str]:
    """Human-readable warnings about a finished layout."""
    warnings: list[str] = []
    if summary.dropped_count:
        names = ", ".join(w.text for w in summary.dropped[:5])
        more = "..." if summary.dropped_count > 5 else ""
        warnings.append(
            f"{summary.dropped_count} of {summary.n_items} words dropped ({names}{more}). "
            + user_message(WORDS_DROPPED)
        )
    clipped = [p.text for p in summary.placed if not validate_inside_surface(p, config.width, config.height)[0]]
    if clipped:
        warnings.append(f"Bounding box extends past the surface edge for: {', '.join(clipped)}")
    if not cells_disjoint(summary.placed):
        warnings.append("Overlapping footprints detected.")
    if eligible is not None and not cells_within(summary.placed, eligible):
        warnings.append("A placement covers cells outside the mask.")
    return warnings
