# tests/test_layout_properties.py
"""
Whole-pass layout properties: no overlapping footprints, mask containment, size monotonic
in weight, reproducibility by seed, heaviest-first ordering, centring, dropping.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from cloudlayout.core.layout import compute_layout, order_words_by_weight
from cloudlayout.core.spiral import font_size_for_weight
from cloudlayout.core.types import GlyphFootprint, LayoutConfig, MaskData, WordItem
from cloudlayout.core.validate import cells_disjoint, cells_within

WORDS = [
    WordItem("python", 10),
    WordItem("layout", 8),
    WordItem("spiral", 7),
    WordItem("grid", 6),
    WordItem("mask", 5),
    WordItem("glyph", 4),
    WordItem("font", 3),
    WordItem("pixel", 3),
    WordItem("cloud", 2),
    WordItem("word", 1),
]


def _unit_measure(text: str, font_size: int, rotation: float) -> GlyphFootprint:
    return GlyphFootprint(occupied=((0, 0),), gw=1, gh=1, width=10, height=10)


def test_order_is_descending_and_stable() -> None:
    words = [WordItem("a", 1), WordItem("b", 3), WordItem("c", 1), WordItem("d", 3)]
    assert [w.text for w in order_words_by_weight(words)] == ["b", "d", "a", "c"]


def test_footprints_never_overlap() -> None:
    config = LayoutConfig(width=400, height=300, max_font_size=60, seed=7)
    result = compute_layout(WORDS, config)
    summary = result.summary
    assert summary.placed_count > 0
    assert summary.placed_count + summary.dropped_count == len(WORDS)
    assert cells_disjoint(summary.placed)
    assert cells_within(summary.placed, result.eligible)
    # every claimed cell is now occupied in the grid
    taken = ~result.grid.snapshot()
    for item in summary.placed:
        for gx, gy in item.cells:
            assert taken[gx, gy]


def test_mask_containment() -> None:
    config = LayoutConfig(
        width=200,
        height=200,
        grid_size=4,
        max_font_size=30,
        mask_shape="circle",
        mask_size=45,
        seed=3,
    )
    result = compute_layout(WORDS, config)
    assert result.mask is not None and not result.mask.is_empty
    assert result.summary.placed_count > 0
    assert cells_within(result.summary.placed, result.eligible)
    for item in result.summary.placed:
        for gx, gy in item.cells:
            # projected circle has diameter ~100 px centred on the surface
            assert 11 <= gx <= 38
            assert 11 <= gy <= 38


def test_empty_mask_places_nothing() -> None:
    config = LayoutConfig(width=100, height=100, seed=1)
    empty = MaskData(width=10, height=10, pixels=frozenset())
    result = compute_layout(WORDS[:3], config, mask=empty)
    assert result.summary.placed_count == 0
    assert result.summary.dropped_count == 3


def test_font_size_monotonic_without_shrink() -> None:
    config = LayoutConfig(width=800, height=600, max_font_size=50, shrink_to_fit=False, seed=11)
    summary = compute_layout(WORDS, config).summary
    max_w = max(w.weight for w in WORDS)
    for item in summary.placed:
        assert item.font_size == font_size_for_weight(item.weight, max_w, config.min_font_size, 50)
    ordered = sorted(summary.placed, key=lambda p: -p.weight)
    sizes = [p.font_size for p in ordered]
    assert sizes == sorted(sizes, reverse=True)


def test_same_seed_same_layout() -> None:
    config = LayoutConfig(width=300, height=200, max_font_size=40, seed=42)
    a = compute_layout(WORDS, config).summary
    b = compute_layout(WORDS, config).summary
    assert a.placed == b.placed
    assert a.dropped == b.dropped


def test_injected_rng_controls_choices() -> None:
    config = LayoutConfig(width=300, height=200, max_font_size=40)
    a = compute_layout(WORDS, config, rng=np.random.default_rng(5)).summary
    b = compute_layout(WORDS, config, rng=np.random.default_rng(5)).summary
    assert [(p.text, p.color, p.rotation) for p in a.placed] == [(p.text, p.color, p.rotation) for p in b.placed]


def test_heaviest_word_placed_first_at_centre() -> None:
    config = LayoutConfig(width=400, height=300, max_font_size=50, rotate=False, seed=0)
    shuffled = list(reversed(WORDS))
    summary = compute_layout(shuffled, config).summary
    first = summary.placed[0]
    assert first.text == "python"
    assert abs(first.center_x - 200) <= config.grid_size
    assert abs(first.center_y - 150) <= config.grid_size


def test_single_word_centred() -> None:
    config = LayoutConfig(width=100, height=100, grid_size=4, max_font_size=20, rotate=False, seed=0)
    summary = compute_layout([WordItem("hi", 1)], config).summary
    assert summary.placed_count == 1
    item = summary.placed[0]
    assert abs(item.center_x - 50) <= 4
    assert abs(item.center_y - 50) <= 4


def test_second_word_dropped_when_grid_full() -> None:
    config = LayoutConfig(width=10, height=10, grid_size=10, seed=0)
    words = [WordItem("light", 1), WordItem("heavy", 5)]
    summary = compute_layout(words, config, measure=_unit_measure).summary
    assert [p.text for p in summary.placed] == ["heavy"]
    assert [w.text for w in summary.dropped] == ["light"]
    assert summary.n_items == 2
    placed = summary.placed[0]
    assert placed.center == (5.0, 5.0)
    assert placed.cells == ((0, 0),)


def test_long_word_on_tiny_surface_dropped() -> None:
    config = LayoutConfig(width=20, height=20, seed=0)
    summary = compute_layout([WordItem("extraordinarily", 1)], config).summary
    assert summary.placed_count == 0
    assert summary.dropped_count == 1


def test_empty_words_give_empty_summary() -> None:
    result = compute_layout([], LayoutConfig(seed=0))
    assert result.summary.placed == []
    assert result.summary.n_items == 0


def test_on_word_placed_called_per_placement() -> None:
    seen: list[str] = []
    config = LayoutConfig(width=10, height=10, grid_size=10, seed=0, on_word_placed=lambda w: seen.append(w.text))
    compute_layout([WordItem("a", 2), WordItem("b", 1)], config, measure=_unit_measure)
    assert seen == ["a"]


@pytest.mark.parametrize("grid_size", [2, 4, 8])
def test_grid_size_never_breaks_disjointness(grid_size: int) -> None:
    config = LayoutConfig(width=240, height=160, grid_size=grid_size, max_font_size=40, seed=2)
    summary = compute_layout(WORDS, config).summary
    assert cells_disjoint(summary.placed)


def test_tied_weights_disjoint_in_any_input_order() -> None:
    ties = [WordItem(t, 2) for t in ("alpha", "beta", "gamma", "delta", "omega", "sigma", "kappa", "theta")]
    config = LayoutConfig(width=300, height=200, max_font_size=30, seed=4)
    orders = [ties, list(reversed(ties)), ties[1::2] + ties[::2]]
    for words in orders:
        result = compute_layout(words, config)
        assert result.summary.placed_count > 0
        assert cells_disjoint(result.summary.placed)
        assert cells_within(result.summary.placed, result.eligible)
    texts = [[p.text for p in compute_layout(words, config).summary.placed] for words in orders]
    # ties keep their input order
    assert texts[0][0] == "alpha"
    assert texts[1][0] == "theta"


def test_word_without_ink_is_dropped() -> None:
    config = LayoutConfig(width=200, height=100, max_font_size=30, seed=0)
    summary = compute_layout([WordItem("a", 2), WordItem(" ", 1)], config).summary
    assert [p.text for p in summary.placed] == ["a"]
    assert [w.text for w in summary.dropped] == [" "]


def test_drop_count_logged(caplog: pytest.LogCaptureFixture) -> None:
    config = LayoutConfig(width=10, height=10, grid_size=10, seed=0)
    with caplog.at_level(logging.INFO, logger="cloudlayout.core.layout"):
        compute_layout([WordItem("a", 2), WordItem("b", 1)], config, measure=_unit_measure)
    assert "1 of 2 words did not fit and were dropped" in caplog.text
