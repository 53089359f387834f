"""
Central configuration for word-cloud layout.
All tunable values live here; no magic numbers in other modules.
"""

from __future__ import annotations
import os

# ----- Paths (repo-relative) -----
REPORTS_DIR: str = "reports"

# ----- Surface -----
DEFAULT_WIDTH_PX: int = 800
DEFAULT_HEIGHT_PX: int = 400

# ----- Typography -----
DEFAULT_FONT_FAMILY: str = "DejaVu Sans"
DEFAULT_FONT_WEIGHT: str = "bold"

DEFAULT_MIN_FONT_SIZE: int = 12
DEFAULT_MAX_FONT_SIZE: int = 100

LINE_HEIGHT_RATIO: float = 1.2
"""Text box height = font_size * LINE_HEIGHT_RATIO (ascent + descent approximation)."""

GLYPH_MARGIN_PX: int = 10
"""Fixed margin (px) added to the rotated glyph bounding box on each axis."""

# ----- Palette -----
DEFAULT_COLORS: tuple[str, ...] = (
    "#667eea",
    "#764ba2",
    "#22c55e",
    "#f59e0b",
    "#ef4444",
    "#06b6d4",
    "#8b5cf6",
    "#ec4899",
)

# ----- Rotation -----
DEFAULT_ROTATE: bool = True
DEFAULT_ROTATE_ANGLES: tuple[float, ...] = (0.0, 90.0)

# ----- Occupancy grid -----
DEFAULT_GRID_SIZE: int = 4
"""Cell size (px) of the collision grid. Larger = faster, coarser packing."""

SPIRAL_POINTS_PER_RING: int = 8
"""Ring d yields SPIRAL_POINTS_PER_RING * d candidate points (ring 0 yields the centre)."""

# ----- Shrink-to-fit -----
DEFAULT_SHRINK_TO_FIT: bool = True

SHRINK_FACTOR: float = 0.7
"""Next attempt font size = max(floor(size * SHRINK_FACTOR), min_font_size)."""

# ----- Mask -----
DEFAULT_MASK_SIZE: int = 400
"""Side (px) of the square surface the mask silhouette is rasterized on."""

MASK_FIT_RATIO: float = 0.9
"""Mask is scaled uniformly to this fraction of the surface and centred."""

MASK_GLYPH_RATIO: float = 0.8
"""Glyph masks are drawn at mask_size * MASK_GLYPH_RATIO px."""

MASK_CIRCLE_INSET_PX: float = 10.0
MASK_STAR_INSET_PX: float = 20.0
MASK_STAR_INNER_RATIO: float = 0.4
MASK_STAR_POINTS: int = 5

BEZIER_SEGMENTS: int = 24
"""Line segments per cubic Bézier when flattening mask outlines."""

CIRCLE_RESOLUTION: int = 32
"""Segments per quarter circle for shapely buffers."""

FONT_READY_TIMEOUT_S: float = 5.0
"""Max wait for the font-ready signal before sampling a glyph mask."""

# ----- Rendering / export -----
SUPPORTED_EXPORT_FORMATS: tuple[str, ...] = ("png", "jpeg", "jpg", "webp", "bmp", "gif")

DEFAULT_EXPORT_FORMAT: str = "png"

DEFAULT_DOWNLOAD_NAME: str = "wordcloud.png"

PLACEHOLDER_COLOR: str = "#9ca3af"
PLACEHOLDER_FONT_SIZE: int = 16

# ----- Interaction -----
DEFAULT_TOOLTIP: bool = True

# ----- Determinism -----
SEED: int | None = None
"""Random seed for rotation/colour draws; None for non-deterministic."""

# ----- Logging -----
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
"""Log level for the CLI. Set env LOG_LEVEL=DEBUG to trace placement."""
