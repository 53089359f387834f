# tests/test_mask.py
"""
Mask rasterizer: built-in shape outlines, glyph masks, font-ready wait.
"""

from __future__ import annotations

import logging

import pytest

from cloudlayout.core.fonts import FontReadySignal
from cloudlayout.core.mask import (
    circle_polygon,
    heart_polygon,
    is_builtin_shape,
    mask_polygon,
    rasterize_mask,
    sample_cubic,
    star_polygon,
)


def test_sample_cubic_endpoints() -> None:
    pts = sample_cubic((0, 0), (0, 10), (10, 10), (10, 0), n=8)
    assert len(pts) == 9
    assert pts[0] == (0, 0)
    assert pts[-1] == pytest.approx((10, 0))
    assert pts[4] == pytest.approx((5, 7.5))


def test_builtin_shapes_known() -> None:
    for shape in ("circle", "heart", "favorite", "cloud", "star", "Circle"):
        assert is_builtin_shape(shape)
    assert not is_builtin_shape("A")
    with pytest.raises(ValueError):
        mask_polygon("triangle", 100)


def test_circle_radius_inset() -> None:
    poly = circle_polygon(100)
    minx, miny, maxx, maxy = poly.bounds
    assert minx == pytest.approx(10, abs=0.1)
    assert maxx == pytest.approx(90, abs=0.1)


def test_favorite_is_heart() -> None:
    assert mask_polygon("favorite", 120).equals(heart_polygon(120))


def test_star_has_ten_vertices() -> None:
    poly = star_polygon(200)
    assert len(poly.exterior.coords) == 11
    assert poly.is_valid


@pytest.mark.parametrize("shape", ["circle", "heart", "cloud", "star"])
def test_builtin_mask_covers_centre(shape: str) -> None:
    mask = rasterize_mask(shape, 100)
    assert mask.width == mask.height == 100
    assert not mask.is_empty
    assert (50, 50) in mask.pixels
    assert (0, 0) not in mask.pixels
    assert all(0 <= x < 100 and 0 <= y < 100 for x, y in mask.pixels)


def test_circle_mask_area() -> None:
    mask = rasterize_mask("circle", 100)
    # r = 40 -> pi * r^2 ~ 5027
    assert 4800 < len(mask.pixels) < 5300


def test_glyph_mask_with_ready_font() -> None:
    mask = rasterize_mask("W", 80, font_ready=FontReadySignal(ready=True))
    assert not mask.is_empty


def test_glyph_mask_waits_for_font_then_logs(caplog: pytest.LogCaptureFixture) -> None:
    signal = FontReadySignal(ready=False)
    with caplog.at_level(logging.WARNING, logger="cloudlayout.core.mask"):
        mask = rasterize_mask("W", 80, font_ready=signal, timeout_s=0.01)
    assert "not ready" in caplog.text
    assert mask.width == 80


def test_font_ready_signal() -> None:
    signal = FontReadySignal(ready=False)
    assert not signal.is_ready
    assert signal.wait(0.01) is False
    signal.set()
    assert signal.is_ready
    assert signal.wait(0.01) is True


def test_mask_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        rasterize_mask("circle", 0)
