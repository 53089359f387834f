# cloudlayout/core/text_metrics.py
"""
Measure text width/height in px using Pillow.
Width is the font's advance for the string; height is font_size * LINE_HEIGHT_RATIO,
so boxes do not depend on which glyphs have ascenders or descenders.
"""

from __future__ import annotations

import math

from cloudlayout.core.config import DEFAULT_FONT_WEIGHT, GLYPH_MARGIN_PX, LINE_HEIGHT_RATIO
from cloudlayout.core.fonts import load_font


def measure_text_px(
    text: str,
    font_family: str,
    font_size: float,
    font_weight: str = DEFAULT_FONT_WEIGHT,
) -> tuple[float, float]:
    """Return (width_px, height_px) of the unrotated text."""
    font = load_font(font_family, int(round(font_size)), font_weight)
    width = float(font.getlength(text))
    height = float(font_size) * LINE_HEIGHT_RATIO
    return (width, height)


def rotated_box_px(
    width: float,
    height: float,
    rotation_deg: float,
    margin_px: int = GLYPH_MARGIN_PX,
) -> tuple[int, int]:
    """
    Axis-aligned box of a width x height rectangle rotated by rotation_deg, plus margin:
    w' = |w cos| + |h sin|, h' = |w sin| + |h cos|.
    """
    rad = math.radians(rotation_deg)
    c = abs(math.cos(rad))
    s = abs(math.sin(rad))
    # round first: cos(90°) is 6e-17, not 0, and must not bump ceil() by a pixel
    w = math.ceil(round(width * c + height * s, 6)) + margin_px
    h = math.ceil(round(width * s + height * c, 6)) + margin_px
    return (int(w), int(h))
