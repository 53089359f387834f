# cloudlayout/core/surface.py
"""
Raster drawing surface used by the mask rasterizer, the glyph extractor and the renderer.
RasterSurface is the capability interface; PillowSurface is the RGBA Pillow backend.
Rotation follows the y-down canvas convention: positive degrees turn clockwise.
"""

from __future__ import annotations

import io
from typing import Protocol, Sequence

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from cloudlayout.core.config import DEFAULT_FONT_WEIGHT, SUPPORTED_EXPORT_FORMATS
from cloudlayout.core.error_codes import SURFACE_UNAVAILABLE, UNSUPPORTED_FORMAT, user_message
from cloudlayout.core.fonts import load_font
from cloudlayout.core.text_metrics import measure_text_px

_TEXT_TILE_PAD_PX = 2

_PIL_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "webp": "WEBP",
    "bmp": "BMP",
    "gif": "GIF",
}


class RasterSurface(Protocol):
    """What the layout core needs from a 2D immediate-mode drawing backend."""

    width: int
    height: int

    def measure_text(self, text: str, font_family: str, font_size: float, font_weight: str = ...) -> tuple[float, float]: ...

    def fill_background(self, color: str) -> None: ...

    def fill_text(
        self,
        text: str,
        cx: float,
        cy: float,
        font_family: str,
        font_size: float,
        fill: str,
        rotation: float = 0.0,
        font_weight: str = ...,
    ) -> None: ...

    def fill_polygon(self, points: Sequence[tuple[float, float]], fill: str) -> None: ...

    def read_alpha(self, region: tuple[int, int, int, int] | None = None) -> np.ndarray: ...

    def to_image(self, fmt: str = "png") -> bytes: ...

    def close(self) -> None: ...


def normalize_format(fmt: str) -> str:
    """Lower-case format name without leading dot or 'image/' prefix; ValueError if unsupported."""
    key = (fmt or "").strip().lower().lstrip(".")
    if key.startswith("image/"):
        key = key[len("image/"):]
    if key not in SUPPORTED_EXPORT_FORMATS:
        raise ValueError(f"{user_message(UNSUPPORTED_FORMAT)} Got {fmt!r}.")
    return key


def _rgba(color: str) -> tuple[int, int, int, int]:
    rgb = ImageColor.getrgb(color)
    if len(rgb) == 4:
        return rgb  # type: ignore[return-value]
    return (rgb[0], rgb[1], rgb[2], 255)


class PillowSurface:
    """RGBA Pillow image implementing RasterSurface. Transparent until painted."""

    def __init__(self, width: int, height: int, background: str | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        fill = _rgba(background) if background else (0, 0, 0, 0)
        self._image: Image.Image | None = Image.new("RGBA", (self.width, self.height), fill)

    @classmethod
    def from_bytes(cls, data: bytes) -> PillowSurface:
        """Load encoded image bytes (e.g. an exported PNG) into a fresh surface."""
        img = Image.open(io.BytesIO(data)).convert("RGBA")
        surface = cls(img.width, img.height)
        surface._image = img
        return surface

    @property
    def image(self) -> Image.Image:
        if self._image is None:
            raise RuntimeError(user_message(SURFACE_UNAVAILABLE))
        return self._image

    def measure_text(
        self,
        text: str,
        font_family: str,
        font_size: float,
        font_weight: str = DEFAULT_FONT_WEIGHT,
    ) -> tuple[float, float]:
        return measure_text_px(text, font_family, font_size, font_weight)

    def fill_background(self, color: str) -> None:
        ImageDraw.Draw(self.image).rectangle((0, 0, self.width, self.height), fill=_rgba(color))

    def fill_text(
        self,
        text: str,
        cx: float,
        cy: float,
        font_family: str,
        font_size: float,
        fill: str,
        rotation: float = 0.0,
        font_weight: str = DEFAULT_FONT_WEIGHT,
    ) -> None:
        """Draw text centred on (cx, cy), rotated about its own centre."""
        font = load_font(font_family, int(round(font_size)), font_weight)
        scratch = ImageDraw.Draw(Image.new("L", (1, 1)))
        left, top, right, bottom = scratch.textbbox((0, 0), text, font=font)
        pad = _TEXT_TILE_PAD_PX
        tile = Image.new("RGBA", (max(1, right - left + 2 * pad), max(1, bottom - top + 2 * pad)), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((pad - left, pad - top), text, font=font, fill=_rgba(fill))
        if rotation % 360:
            tile = tile.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
        self._composite(tile, int(round(cx - tile.width / 2)), int(round(cy - tile.height / 2)))

    def fill_polygon(self, points: Sequence[tuple[float, float]], fill: str) -> None:
        if len(points) < 3:
            return
        ImageDraw.Draw(self.image).polygon([(float(x), float(y)) for x, y in points], fill=_rgba(fill))

    def read_alpha(self, region: tuple[int, int, int, int] | None = None) -> np.ndarray:
        """Alpha channel as (rows, cols) uint8 array; region is (x0, y0, x1, y1), clipped."""
        alpha = np.asarray(self.image.getchannel("A"), dtype=np.uint8)
        if region is None:
            return alpha
        x0, y0, x1, y1 = region
        x0, y0 = max(0, int(x0)), max(0, int(y0))
        x1, y1 = min(self.width, int(x1)), min(self.height, int(y1))
        return alpha[y0:y1, x0:x1]

    def to_image(self, fmt: str = "png") -> bytes:
        key = normalize_format(fmt)
        img = self.image
        if key in ("jpeg", "jpg", "bmp"):
            flat = Image.new("RGB", img.size, (255, 255, 255))
            flat.paste(img, mask=img.getchannel("A"))
            img = flat
        buf = io.BytesIO()
        img.save(buf, format=_PIL_FORMATS[key])
        return buf.getvalue()

    def close(self) -> None:
        if self._image is not None:
            self._image.close()
        self._image = None

    def _composite(self, tile: Image.Image, x: int, y: int) -> None:
        # alpha_composite needs a non-negative destination, so clip the tile first.
        src_x0, src_y0 = max(0, -x), max(0, -y)
        src_x1 = min(tile.width, self.width - x)
        src_y1 = min(tile.height, self.height - y)
        if src_x1 <= src_x0 or src_y1 <= src_y0:
            return
        self.image.alpha_composite(
            tile,
            dest=(x + src_x0, y + src_y0),
            source=(src_x0, src_y0, src_x1, src_y1),
        )
