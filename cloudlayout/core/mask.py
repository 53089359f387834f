# cloudlayout/core/mask.py
"""
Mask rasterizer: draw a silhouette (built-in shape or a glyph) on a mask_size x mask_size
surface and keep the coordinates of every pixel with non-zero alpha.
Built-in outlines are built as shapely polygons (Béziers flattened, circles buffered) and filled solid.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np
from shapely.geometry import MultiPolygon, Point, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from cloudlayout.core.config import (
    BEZIER_SEGMENTS,
    CIRCLE_RESOLUTION,
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_WEIGHT,
    FONT_READY_TIMEOUT_S,
    MASK_CIRCLE_INSET_PX,
    MASK_GLYPH_RATIO,
    MASK_STAR_INNER_RATIO,
    MASK_STAR_INSET_PX,
    MASK_STAR_POINTS,
)
from cloudlayout.core.error_codes import FONT_NOT_READY, MASK_EMPTY, user_message
from cloudlayout.core.fonts import FontReadySignal
from cloudlayout.core.surface import PillowSurface, RasterSurface
from cloudlayout.core.types import MaskData

logger = logging.getLogger(__name__)

_MASK_FILL = "#000000"

Point2 = tuple[float, float]


def sample_cubic(p0: Point2, p1: Point2, p2: Point2, p3: Point2, n: int = BEZIER_SEGMENTS) -> list[Point2]:
    """Uniformly sample a cubic Bézier into n segments (n+1 points including endpoints)."""
    pts = []
    for i in range(n + 1):
        t = i / n
        mt = 1 - t
        x = mt * mt * mt * p0[0] + 3 * mt * mt * t * p1[0] + 3 * mt * t * t * p2[0] + t * t * t * p3[0]
        y = mt * mt * mt * p0[1] + 3 * mt * mt * t * p1[1] + 3 * mt * t * t * p2[1] + t * t * t * p3[1]
        pts.append((x, y))
    return pts


def circle_polygon(size: int) -> Polygon:
    r = size / 2 - MASK_CIRCLE_INSET_PX
    return Point(size / 2, size / 2).buffer(max(r, 0.5), quad_segs=CIRCLE_RESOLUTION)


def heart_polygon(size: int) -> Polygon:
    """Four cubic Béziers around (size/2, size/2.2) in units of size/100."""
    cx = size / 2
    cy = size / 2.2
    s = size / 100
    start = (cx, cy + 30 * s)
    curves = [
        ((cx, cy + 20 * s), (cx - 25 * s, cy - 10 * s), (cx - 25 * s, cy - 20 * s)),
        ((cx - 25 * s, cy - 35 * s), (cx - 10 * s, cy - 40 * s), (cx, cy - 30 * s)),
        ((cx + 10 * s, cy - 40 * s), (cx + 25 * s, cy - 35 * s), (cx + 25 * s, cy - 20 * s)),
        ((cx + 25 * s, cy - 10 * s), (cx, cy + 20 * s), (cx, cy + 30 * s)),
    ]
    outline: list[Point2] = [start]
    pen = start
    for c1, c2, end in curves:
        outline.extend(sample_cubic(pen, c1, c2, end)[1:])
        pen = end
    poly = Polygon(outline)
    return poly if poly.is_valid else poly.buffer(0)


def star_polygon(size: int, points: int = MASK_STAR_POINTS) -> Polygon:
    """Polar loop alternating outer/inner radius, first point straight up."""
    cx = cy = size / 2
    outer = max(size / 2 - MASK_STAR_INSET_PX, 1.0)
    inner = outer * MASK_STAR_INNER_RATIO
    coords = []
    for i in range(points * 2):
        r = outer if i % 2 == 0 else inner
        angle = i * math.pi / points - math.pi / 2
        coords.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return Polygon(coords)


def cloud_polygon(size: int) -> BaseGeometry:
    """Union of five overlapping circles in units of size/200."""
    cx = cy = size / 2
    s = size / 200
    lobes = [(-40, 10, 35), (0, -20, 50), (50, 0, 40), (20, 20, 35), (-20, 25, 30)]
    circles = [
        Point(cx + dx * s, cy + dy * s).buffer(r * s, quad_segs=CIRCLE_RESOLUTION)
        for dx, dy, r in lobes
    ]
    return unary_union(circles)


SHAPE_BUILDERS: dict[str, Callable[[int], BaseGeometry]] = {
    "circle": circle_polygon,
    "heart": heart_polygon,
    "favorite": heart_polygon,
    "cloud": cloud_polygon,
    "star": star_polygon,
}


def is_builtin_shape(shape: str) -> bool:
    return shape.lower() in SHAPE_BUILDERS


def mask_polygon(shape: str, size: int) -> BaseGeometry:
    """Vector outline of a built-in shape in mask pixel coordinates."""
    key = shape.lower()
    if key not in SHAPE_BUILDERS:
        raise ValueError(f"Not a built-in mask shape: {shape!r}")
    return SHAPE_BUILDERS[key](size)


def _fill_geometry(surface: RasterSurface, geom: BaseGeometry) -> None:
    if geom is None or geom.is_empty:
        return
    parts = list(geom.geoms) if isinstance(geom, MultiPolygon) else [geom]
    for part in parts:
        surface.fill_polygon(list(part.exterior.coords), _MASK_FILL)


def extract_mask_pixels(surface: RasterSurface) -> MaskData:
    """Scan every pixel; keep (x, y) where alpha > 0."""
    alpha = surface.read_alpha()
    ys, xs = np.nonzero(alpha > 0)
    pixels = frozenset(zip(xs.tolist(), ys.tolist()))
    return MaskData(width=surface.width, height=surface.height, pixels=pixels)


def rasterize_mask(
    shape: str,
    size: int,
    surface_factory: Callable[[int, int], RasterSurface] = PillowSurface,
    font_family: str | None = None,
    font_ready: FontReadySignal | None = None,
    timeout_s: float = FONT_READY_TIMEOUT_S,
) -> MaskData:
    """
    Rasterize a mask at size x size. Built-in shapes: circle, heart (alias favorite), cloud, star.
    Any other string is drawn as glyph text centred at size * MASK_GLYPH_RATIO px, after the
    font-ready signal fires. A timed-out wait only logs: the mask may come out empty or wrong.
    """
    if size < 1:
        raise ValueError(f"Mask size must be >= 1, got {size}")
    surface = surface_factory(size, size)
    try:
        if is_builtin_shape(shape):
            _fill_geometry(surface, mask_polygon(shape, size))
        else:
            if font_ready is not None and not font_ready.wait(timeout_s):
                logger.warning(f"{user_message(FONT_NOT_READY)} (glyph {shape!r}, waited {timeout_s:.1f}s)")
            surface.fill_text(
                shape,
                size / 2,
                size / 2,
                font_family=font_family or DEFAULT_FONT_FAMILY,
                font_size=size * MASK_GLYPH_RATIO,
                fill=_MASK_FILL,
                font_weight=DEFAULT_FONT_WEIGHT,
            )
        mask = extract_mask_pixels(surface)
    finally:
        surface.close()
    if mask.is_empty:
        logger.warning(f"{user_message(MASK_EMPTY)} (shape {shape!r})")
    else:
        logger.debug(f"Mask {shape!r}: {len(mask.pixels)} opaque pixels at {size}x{size}")
    return mask
