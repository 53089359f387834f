# cloudlayout/core/render.py
"""
Renderer and hit-tester: draw accepted placements onto the output surface, find the word
under a pointer, export the surface. render_debug writes a Matplotlib overlay of the
occupancy grid and placement boxes.
"""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from cloudlayout.core.config import DEFAULT_EXPORT_FORMAT, PLACEHOLDER_COLOR, PLACEHOLDER_FONT_SIZE
from cloudlayout.core.error_codes import NO_DATA, user_message
from cloudlayout.core.surface import RasterSurface
from cloudlayout.core.types import LayoutConfig, PlacedItem


def draw_placed_item(surface: RasterSurface, placed: PlacedItem, config: LayoutConfig) -> None:
    """Translate to the centre, rotate, draw centred text, restore."""
    surface.fill_text(
        placed.text,
        placed.center_x,
        placed.center_y,
        font_family=config.font_family,
        font_size=placed.font_size,
        fill=placed.color,
        rotation=placed.rotation,
        font_weight=config.font_weight,
    )


def draw_placeholder(surface: RasterSurface, config: LayoutConfig, message: str | None = None) -> None:
    """'No data' text in the middle of the surface; drawn instead of a layout for empty input."""
    surface.fill_text(
        message or user_message(NO_DATA),
        surface.width / 2,
        surface.height / 2,
        font_family=config.font_family,
        font_size=PLACEHOLDER_FONT_SIZE,
        fill=PLACEHOLDER_COLOR,
        font_weight="normal",
    )


def hit_test(placed: Sequence[PlacedItem], x: float, y: float) -> PlacedItem | None:
    """
    First placement whose unrotated bounding box contains (x, y). Linear scan in placement
    order; fine for word-cloud sizes (tens to low hundreds), not for large item counts.
    """
    for item in placed:
        if item.contains(x, y):
            return item
    return None


def tooltip_text(placed: PlacedItem) -> str:
    return f"{placed.text} (weight: {placed.weight:g})"


def export_image(surface: RasterSurface, fmt: str = DEFAULT_EXPORT_FORMAT) -> bytes:
    """Encode the surface. Raises ValueError for unsupported formats."""
    return surface.to_image(fmt)


def render_debug(
    eligible: np.ndarray,
    occupied: np.ndarray,
    placed: Sequence[PlacedItem],
    config: LayoutConfig,
    output_path: str | Path,
    scale: int = 1,
) -> None:
    """
    Debug overlay: mask-eligible cells (light), cells taken by words (dark), each placement's
    bounding box and centre. eligible/occupied are grid snapshots of shape (ngx, ngy), True = free.
    """
    w, h = config.width * scale, config.height * scale
    fig = plt.figure(figsize=(w / 100.0, h / 100.0), dpi=100, constrained_layout=False)
    # Leave bottom margin so legend does not overlap the image
    ax = fig.add_axes([0.05, 0.08, 0.9, 0.88])
    ax.axis("off")

    g = config.grid_size
    ngx, ngy = eligible.shape
    state = np.zeros((ngy, ngx))
    state[eligible.T] = 1.0
    state[eligible.T & ~occupied.T] = 2.0
    ax.imshow(
        state,
        cmap="Blues",
        vmin=0.0,
        vmax=2.5,
        extent=(0, ngx * g, ngy * g, 0),
        interpolation="nearest",
    )

    for i, item in enumerate(placed):
        ax.add_patch(
            Rectangle(
                (item.x, item.y),
                item.width,
                item.height,
                fill=False,
                edgecolor=item.color,
                linewidth=1,
                label="placement" if i == 0 else None,
            )
        )
    if placed:
        ax.scatter(
            [p.center_x for p in placed],
            [p.center_y for p in placed],
            s=6,
            c="black",
            label="centres",
        )

    ax.set_xlim(0, config.width)
    ax.set_ylim(config.height, 0)
    ax.set_aspect("equal", adjustable="box")
    handles, _ = ax.get_legend_handles_labels()
    extra = []
    if handles:
        # Legend in the reserved bottom margin so it never overlaps the image
        extra.append(ax.legend(loc="upper center", bbox_to_anchor=(0.5, -0.02), ncol=2, fontsize=8))
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message=".*constrained_layout.*", category=UserWarning)
        fig.savefig(output_path, dpi=100, facecolor="white", bbox_inches="tight", bbox_extra_artists=extra)
    plt.close(fig)
