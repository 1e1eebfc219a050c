"""In-memory RGBA pixel buffers and integer rectangles."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from storyboard_grid.constants import COLOR_BLACK, COLOR_MODE_RGBA, RGBA_CHANNELS


@dataclass(frozen=True)
class Rect:
    """Simple rectangle with convenience accessors."""

    x0: int
    y0: int
    x1: int
    y1: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> Rect:
        """Build a rectangle from its top left corner and size."""
        return cls(x, y, x + w, y + h)

    @property
    def w(self) -> int:
        """Width."""
        return self.x1 - self.x0

    @property
    def h(self) -> int:
        """Height."""
        return self.y1 - self.y0

    def size(self) -> tuple[int, int]:
        """Return (w, h)."""
        return self.w, self.h

    def inset(self, dx: int, dy: int) -> Rect:
        """Return a copy inset by (dx, dy) on all sides."""
        return Rect(self.x0 + dx, self.y0 + dy, self.x1 - dx, self.y1 - dy)

    def as_xywh(self) -> tuple[int, int, int, int]:
        """Return (x, y, w, h)."""
        return self.x0, self.y0, self.w, self.h


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Decoded image held as a ``(height, width, 4)`` uint8 RGBA array.

    Buffers are treated as immutable: crop and resize return new
    buffers and never write into ``data``.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        """Reject arrays that are not 8-bit RGBA images."""
        if self.data.ndim != 3 or self.data.shape[2] != RGBA_CHANNELS:  # noqa: PLR2004
            msg = f"Expected an (H, W, 4) array, got shape {self.data.shape}"
            raise ValueError(msg)
        if self.data.dtype != np.uint8:
            msg = f"Expected uint8 pixels, got {self.data.dtype}"
            raise ValueError(msg)

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        """Convert a PIL image of any mode into an RGBA buffer."""
        rgba = img if img.mode == COLOR_MODE_RGBA else img.convert(
            COLOR_MODE_RGBA)
        return cls(np.array(rgba, dtype=np.uint8))

    @classmethod
    def blank(
        cls,
        width: int,
        height: int,
        color: tuple[int, int, int] = COLOR_BLACK,
    ) -> PixelBuffer:
        """Return an opaque buffer filled with one color."""
        data = np.empty((height, width, RGBA_CHANNELS), dtype=np.uint8)
        data[..., :3] = color
        data[..., 3] = 255
        return cls(data)

    @property
    def width(self) -> int:
        """Width in pixels."""
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        """Height in pixels."""
        return int(self.data.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """Return (width, height)."""
        return self.width, self.height

    def rgb(self) -> np.ndarray:
        """Return the color channels widened to int32 for arithmetic."""
        return self.data[..., :3].astype(np.int32)

    def crop(self, rect: Rect) -> PixelBuffer:
        """Return a copy of the pixels inside ``rect``, clipped to bounds."""
        x0 = max(0, min(self.width, rect.x0))
        x1 = max(x0, min(self.width, rect.x1))
        y0 = max(0, min(self.height, rect.y0))
        y1 = max(y0, min(self.height, rect.y1))
        return PixelBuffer(self.data[y0:y1, x0:x1].copy())

    def to_image(self) -> Image.Image:
        """Return a PIL RGBA image sharing no memory with the buffer."""
        return Image.fromarray(self.data.copy())

    def resize(
        self,
        size: tuple[int, int],
        resample: Image.Resampling = Image.Resampling.LANCZOS,
    ) -> PixelBuffer:
        """Resample to ``size``; returns an unchanged copy if equal."""
        w, h = size
        if w <= 0 or h <= 0:
            msg = "Target size must be positive"
            raise ValueError(msg)
        if (w, h) == self.size:
            return PixelBuffer(self.data.copy())
        resized = self.to_image().resize((w, h), resample)
        return PixelBuffer.from_image(resized)
