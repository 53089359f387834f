# cloudlayout/core/types.py
"""
Dataclasses for word input, layout configuration, mask data, glyph footprints
and placement results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from cloudlayout.core.config import (
    DEFAULT_COLORS,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT,
    DEFAULT_GRID_SIZE,
    DEFAULT_HEIGHT_PX,
    DEFAULT_MASK_SIZE,
    DEFAULT_MAX_FONT_SIZE,
    DEFAULT_MIN_FONT_SIZE,
    DEFAULT_ROTATE,
    DEFAULT_ROTATE_ANGLES,
    DEFAULT_SHRINK_TO_FIT,
    DEFAULT_TOOLTIP,
    DEFAULT_WIDTH_PX,
    SEED,
)


@dataclass(frozen=True)
class WordItem:
    """One input word. Weight drives both font size and placement order."""
    text: str
    weight: float
    color: str | None = None

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("WordItem text must be non-empty")
        if not self.weight > 0:
            raise ValueError(f"WordItem weight must be > 0, got {self.weight!r} for {self.text!r}")


@dataclass
class LayoutConfig:
    """Surface, typography, grid, mask and interaction settings for one engine."""
    width: int = DEFAULT_WIDTH_PX
    height: int = DEFAULT_HEIGHT_PX
    min_font_size: int = DEFAULT_MIN_FONT_SIZE
    max_font_size: int = DEFAULT_MAX_FONT_SIZE
    font_family: str = DEFAULT_FONT_FAMILY
    font_weight: str = DEFAULT_FONT_WEIGHT
    colors: tuple[str, ...] = DEFAULT_COLORS
    rotate: bool = DEFAULT_ROTATE
    rotate_angles: tuple[float, ...] = DEFAULT_ROTATE_ANGLES
    grid_size: int = DEFAULT_GRID_SIZE
    mask_shape: str | None = None
    mask_size: int = DEFAULT_MASK_SIZE
    mask_font_family: str | None = None
    shrink_to_fit: bool = DEFAULT_SHRINK_TO_FIT
    max_shrink_attempts: int | None = None
    background_color: str | None = None
    tooltip: bool = DEFAULT_TOOLTIP
    seed: int | None = SEED
    on_click: Callable[[PlacedItem, Any], None] | None = None
    on_word_placed: Callable[[WordItem], None] | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Surface size must be positive, got {self.width}x{self.height}")
        if self.min_font_size <= 0:
            raise ValueError("min_font_size must be > 0")
        if self.min_font_size > self.max_font_size:
            raise ValueError(
                f"min_font_size ({self.min_font_size}) exceeds max_font_size ({self.max_font_size})"
            )
        if self.grid_size < 1:
            raise ValueError("grid_size must be >= 1")
        if self.mask_size < 1:
            raise ValueError("mask_size must be >= 1")
        if not self.colors:
            raise ValueError("colors palette must not be empty")
        if self.max_shrink_attempts is not None and self.max_shrink_attempts < 0:
            raise ValueError("max_shrink_attempts must be >= 0 or None")
        self.colors = tuple(self.colors)
        self.rotate_angles = tuple(self.rotate_angles)

    @property
    def grid_dims(self) -> tuple[int, int]:
        """(ngx, ngy): number of grid cells along x and y."""
        ngx = -(-self.width // self.grid_size)
        ngy = -(-self.height // self.grid_size)
        return (ngx, ngy)


@dataclass(frozen=True)
class MaskData:
    """Opaque pixel set of a rasterized silhouette. Fill colour is discarded."""
    width: int
    height: int
    pixels: frozenset[tuple[int, int]]

    @property
    def is_empty(self) -> bool:
        return not self.pixels


@dataclass(frozen=True)
class GlyphFootprint:
    """
    Grid footprint of one word at one font size and rotation.
    occupied: block offsets (dx, dy) relative to the footprint's top-left.
    gw, gh: footprint size in blocks; width, height: pixel size incl. margin.
    """
    occupied: tuple[tuple[int, int], ...]
    gw: int
    gh: int
    width: int
    height: int


@dataclass(frozen=True)
class PlacedItem:
    """An accepted placement. (x, y) is the top-left of the unrotated bounding box."""
    text: str
    weight: float
    x: float
    y: float
    width: float
    height: float
    center_x: float
    center_y: float
    font_size: int
    color: str
    rotation: float
    cells: tuple[tuple[int, int], ...] = ()

    @property
    def top_left(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def size(self) -> tuple[float, float]:
        return (self.width, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return (self.center_x, self.center_y)

    def contains(self, px: float, py: float) -> bool:
        """Inclusive axis-aligned bounding-box test."""
        return (
            self.x <= px <= self.x + self.width
            and self.y <= py <= self.y + self.height
        )


@dataclass
class LayoutSummary:
    """Result of one layout pass."""
    placed: list[PlacedItem]
    n_items: int
    dropped: list[WordItem] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return len(self.placed)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)


@dataclass(frozen=True)
class PointerEvent:
    """Pointer coordinates in surface space; raw carries the backend's native event."""
    x: float
    y: float
    raw: Any = None
