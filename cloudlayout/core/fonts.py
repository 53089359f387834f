# cloudlayout/core/fonts.py
"""
Load Pillow fonts by family/weight with fallback, and the one-shot font-ready signal
awaited before glyph masks are sampled.
"""

from __future__ import annotations

import logging
import threading
import warnings
from functools import lru_cache

from PIL import ImageFont

logger = logging.getLogger(__name__)

_font_warning_emitted: set[str] = set()

_BOLD_WEIGHTS = ("bold", "bolder", "600", "700", "800", "900")


def _candidate_files(font_family: str, font_weight: str) -> list[str]:
    compact = font_family.replace(" ", "")
    names: list[str] = []
    if font_weight.lower() in _BOLD_WEIGHTS:
        names += [
            f"{font_family}-Bold.ttf",
            f"{compact}-Bold.ttf",
            f"{font_family} Bold.ttf",
            "DejaVuSans-Bold.ttf",
            "arialbd.ttf",
            "Arial Bold.ttf",
        ]
    names += [
        font_family,
        font_family + ".ttf",
        compact + ".ttf",
        "DejaVuSans.ttf",
        "arial.ttf",
        "Arial.ttf",
    ]
    return names


@lru_cache(maxsize=256)
def load_font(font_family: str, font_size: int, font_weight: str = "normal") -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Load a Pillow font; fall back to Pillow's default font with a one-time warning."""
    size = max(1, int(font_size))
    for name in _candidate_files(font_family, font_weight):
        try:
            return ImageFont.truetype(name, size=size)
        except (OSError, IOError):
            continue
    if font_family not in _font_warning_emitted:
        _font_warning_emitted.add(font_family)
        logger.warning(f"Font not found: {font_family!r}; using Pillow default font")
        warnings.warn(f"Font not found: {font_family!r}; using default.", UserWarning)
    return ImageFont.load_default(size=size)


class FontReadySignal:
    """
    One-shot notification that the glyph font is available to the rendering backend.
    Created already-set for locally installed fonts; set() it once a deferred font is loaded.
    """

    def __init__(self, ready: bool = True) -> None:
        self._event = threading.Event()
        if ready:
            self._event.set()

    @property
    def is_ready(self) -> bool:
        return self._event.is_set()

    def set(self) -> None:
        self._event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until ready or timeout; return readiness."""
        return self._event.wait(timeout)
