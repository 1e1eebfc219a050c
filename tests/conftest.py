"""
Test configuration and shared fixtures for storyboard_grid.

This module defines reusable pytest fixtures for synthetic composite
images, pixel buffers and logger handling. These fixtures support all
test modules in the test suite.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
import io
import struct
import zlib
from collections.abc import Callable, Sequence
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from storyboard_grid.constants import COLOR_BLACK
from storyboard_grid.logging_utils import logger
from storyboard_grid.splitting import PixelBuffer

RGB = tuple[int, int, int]

# Distinct, bright block colors; none near black, none separator green.
PALETTE: tuple[RGB, ...] = (
    (220, 40, 40),
    (40, 190, 60),
    (40, 80, 220),
    (230, 200, 30),
    (200, 60, 200),
    (30, 200, 200),
    (240, 140, 30),
    (140, 90, 40),
    (120, 120, 240),
    (250, 250, 250),
    (90, 160, 90),
    (200, 120, 160),
)


def build_composite_image(
    cols: int,
    rows: int,
    cell_size: tuple[int, int],
    colors: Sequence[RGB],
) -> Image.Image:
    """Build a borderless grid of solid blocks in row-major order."""
    cell_w, cell_h = cell_size
    img = Image.new("RGB", (cols * cell_w, rows * cell_h))
    for idx, color in enumerate(colors[: cols * rows]):
        row, col = divmod(idx, cols)
        block = Image.new("RGB", (cell_w, cell_h), color)
        img.paste(block, (col * cell_w, row * cell_h))
    return img


def png_bytes(img: Image.Image) -> bytes:
    """Encode a PIL image as PNG bytes."""
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def make_composite() -> Callable[..., bytes]:
    """
    Factory for PNG composites made of solid colored blocks.

    ``blank`` lists row-major indices painted black to mimic empty
    placeholder panels.
    """

    def _build(
        cols: int,
        rows: int,
        *,
        cell_size: tuple[int, int] = (160, 90),
        colors: Sequence[RGB] | None = None,
        blank: Sequence[int] = (),
    ) -> bytes:
        palette = list(colors or PALETTE)
        total = cols * rows
        cells = [palette[i % len(palette)] for i in range(total)]
        for idx in blank:
            cells[idx] = COLOR_BLACK
        return png_bytes(build_composite_image(cols, rows, cell_size, cells))

    return _build


@pytest.fixture
def palette() -> tuple[RGB, ...]:
    """Block colors used by ``make_composite`` in row-major order."""
    return PALETTE


@pytest.fixture
def composite_file(
    tmp_path: Path,
    make_composite: Callable[..., bytes],
) -> Path:
    """Write a 3x3 landscape composite to disk and return its path."""
    path = tmp_path / "sheet.png"
    path.write_bytes(make_composite(3, 3))
    return path


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator so noise images are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def noise_buffer(rng: np.random.Generator) -> Callable[[int, int], PixelBuffer]:
    """Factory for opaque random-noise pixel buffers."""

    def _build(width: int, height: int) -> PixelBuffer:
        data = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
        data[..., 3] = 255
        return PixelBuffer(data)

    return _build


@pytest.fixture
def black_panel() -> PixelBuffer:
    """A 100x100 all-black panel."""
    return PixelBuffer.blank(100, 100)


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the package logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)


def _png_chunk(kind: bytes, body: bytes) -> bytes:
    crc = zlib.crc32(kind + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", crc)


@pytest.fixture
def oversized_png() -> bytes:
    """A tiny PNG whose header declares a 30000x30000 RGB image."""
    header = struct.pack(">IIBBBBB", 30000, 30000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )
