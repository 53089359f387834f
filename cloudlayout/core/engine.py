# cloudlayout/core/engine.py
"""
WordCloudEngine: the caller-owned handle around one output surface.
Every set_words / refresh / configure call is a full re-layout; the previous surface,
grid and placements are discarded first and the new ones are committed only when the
pass completes. Not re-entrant: callers serialize passes on one instance.
"""

from __future__ import annotations

import base64
import copy
import dataclasses
import logging
from pathlib import Path
from typing import Any, Callable, Iterable

import numpy as np

from cloudlayout.core.config import DEFAULT_DOWNLOAD_NAME, DEFAULT_EXPORT_FORMAT
from cloudlayout.core.error_codes import SURFACE_UNAVAILABLE, user_message
from cloudlayout.core.events import PointerEventSource
from cloudlayout.core.fonts import FontReadySignal
from cloudlayout.core.grid import OccupancyGrid
from cloudlayout.core.layout import compute_layout
from cloudlayout.core.render import draw_placeholder, export_image, hit_test, tooltip_text
from cloudlayout.core.spiral import Measure
from cloudlayout.core.surface import PillowSurface, RasterSurface, normalize_format
from cloudlayout.core.types import LayoutConfig, LayoutSummary, MaskData, PlacedItem, PointerEvent, WordItem

logger = logging.getLogger(__name__)


class WordCloudEngine:
    """
    Layout engine handle. Construction runs the first pass.

    surface_factory builds every raster surface (output, scratch, mask); rng replaces the
    per-pass np.random.default_rng(config.seed) and is copied at the start of each pass,
    never advanced itself; measure replaces glyph rasterization (both are test seams).
    """

    def __init__(
        self,
        config: LayoutConfig,
        words: Iterable[WordItem] = (),
        surface_factory: Callable[[int, int], RasterSurface] = PillowSurface,
        font_ready: FontReadySignal | None = None,
        rng: np.random.Generator | None = None,
        measure: Measure | None = None,
    ) -> None:
        self.config = config
        self.words: list[WordItem] = list(words)
        self._surface_factory = surface_factory
        self._font_ready = font_ready
        self._rng = rng
        self._measure = measure

        self.surface: RasterSurface | None = None
        self.placed_items: list[PlacedItem] = []
        self.grid: OccupancyGrid | None = None
        self.eligible: np.ndarray | None = None
        self.mask: MaskData | None = None
        self.last_summary: LayoutSummary | None = None
        self.cursor = "default"
        self.tooltip: str | None = None
        self._source: PointerEventSource | None = None
        self._destroyed = False

        self.refresh()

    # ----- layout -----

    def set_words(self, words: Iterable[WordItem]) -> LayoutSummary:
        """Replace the word list and re-layout."""
        self.words = list(words)
        return self.refresh()

    def configure(self, **changes: Any) -> LayoutSummary:
        """Replace config fields (validated like a new LayoutConfig) and re-layout."""
        self.config = dataclasses.replace(self.config, **changes)
        return self.refresh()

    def resize(self, width: int, height: int) -> LayoutSummary:
        return self.configure(width=width, height=height)

    def refresh(self) -> LayoutSummary:
        """Re-run the layout with the current words and config."""
        self._ensure_alive()
        self._discard_pass()
        config = self.config

        surface = self._surface_factory(config.width, config.height)
        try:
            if config.background_color:
                surface.fill_background(config.background_color)
            if not self.words:
                draw_placeholder(surface, config)
                summary = LayoutSummary(placed=[], n_items=0, dropped=[])
                grid = eligible = mask = None
            else:
                result = compute_layout(
                    self.words,
                    config,
                    surface=surface,
                    surface_factory=self._surface_factory,
                    rng=self._pass_rng(),
                    font_ready=self._font_ready,
                    measure=self._measure,
                )
                summary, grid, eligible, mask = result.summary, result.grid, result.eligible, result.mask
        except Exception:
            surface.close()
            raise

        self.surface = surface
        self.placed_items = list(summary.placed)
        self.grid = grid
        self.eligible = eligible
        self.mask = mask
        self.last_summary = summary
        logger.debug(
            f"Pass complete: {summary.placed_count}/{summary.n_items} placed, {summary.dropped_count} dropped"
        )
        return summary

    def _pass_rng(self) -> np.random.Generator | None:
        """Fresh copy of the injected generator, so every pass starts from the same state."""
        if self._rng is None:
            return None
        return copy.deepcopy(self._rng)

    @property
    def dropped_count(self) -> int:
        return self.last_summary.dropped_count if self.last_summary is not None else 0

    # ----- hit-testing / interaction -----

    def hit_test(self, x: float, y: float) -> PlacedItem | None:
        return hit_test(self.placed_items, x, y)

    def handle_pointer_move(self, event: PointerEvent) -> str | None:
        """Update cursor and tooltip for the word under the pointer; return the tooltip text."""
        word = self.hit_test(event.x, event.y)
        if word is None:
            self.cursor = "default"
            self.tooltip = None
            return None
        self.cursor = "pointer"
        self.tooltip = tooltip_text(word) if self.config.tooltip else None
        return self.tooltip

    def handle_click(self, event: PointerEvent) -> PlacedItem | None:
        """Hit-test the click; call on_click(placed, raw_event) when it lands on a word."""
        word = self.hit_test(event.x, event.y)
        if word is not None and self.config.on_click is not None:
            self.config.on_click(word, event.raw if event.raw is not None else event)
        return word

    def attach(self, source: PointerEventSource) -> None:
        """Subscribe to a pointer-event source (replacing any previous one)."""
        self._ensure_alive()
        self.detach()
        source.add_listener("move", self.handle_pointer_move)
        source.add_listener("click", self.handle_click)
        self._source = source

    def detach(self) -> None:
        if self._source is None:
            return
        self._source.remove_listener("move", self.handle_pointer_move)
        self._source.remove_listener("click", self.handle_click)
        self._source = None

    # ----- export -----

    def export_image(self, fmt: str = DEFAULT_EXPORT_FORMAT) -> bytes:
        """Encoded surface bytes. RuntimeError if there is no surface, ValueError for bad formats."""
        if self.surface is None:
            raise RuntimeError(user_message(SURFACE_UNAVAILABLE))
        return export_image(self.surface, fmt)

    def to_data_url(self, fmt: str = DEFAULT_EXPORT_FORMAT) -> str:
        key = normalize_format(fmt)
        mime = "jpeg" if key == "jpg" else key
        encoded = base64.b64encode(self.export_image(key)).decode("ascii")
        return f"data:image/{mime};base64,{encoded}"

    def download(self, filename: str | Path = DEFAULT_DOWNLOAD_NAME) -> Path:
        """Write the exported image; format follows the file suffix (png when there is none)."""
        path = Path(filename)
        fmt = path.suffix.lstrip(".") or DEFAULT_EXPORT_FORMAT
        data = self.export_image(fmt)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Wrote {path} ({len(data)} bytes)")
        return path

    # ----- teardown -----

    def destroy(self) -> None:
        """Release the surface, detach pointer listeners, clear placements and grid."""
        if self._destroyed:
            return
        self.detach()
        self._discard_pass()
        self.last_summary = None
        self._destroyed = True

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise RuntimeError(user_message(SURFACE_UNAVAILABLE))

    def _discard_pass(self) -> None:
        if self.surface is not None:
            self.surface.close()
        self.surface = None
        self.placed_items = []
        self.grid = None
        self.eligible = None
        self.mask = None
        self.cursor = "default"
        self.tooltip = None
