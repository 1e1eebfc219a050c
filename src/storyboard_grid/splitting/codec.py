"""Image decoding and encoding between raw bytes and pixel buffers."""

from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path
from typing import Protocol, runtime_checkable

from PIL import Image, UnidentifiedImageError

from storyboard_grid.logging_utils import logger
from storyboard_grid.splitting.buffer import PixelBuffer

_DATA_URL_PREFIX = "data:"
_REMOTE_PREFIXES = ("http://", "https://")


class LoadError(OSError):
    """Raised when a composite image cannot be read or decoded."""


@runtime_checkable
class ImageCodec(Protocol):
    """Converts between encoded image bytes and RGBA pixel buffers."""

    def decode(self, payload: bytes) -> PixelBuffer:
        """Decode encoded image bytes into a pixel buffer."""
        ...

    def encode(self, pixels: PixelBuffer) -> bytes:
        """Encode a pixel buffer into image bytes."""
        ...


class PillowCodec:
    """Pillow-backed codec that writes PNG by default."""

    def __init__(self, fmt: str = "PNG") -> None:
        self.format = fmt

    def decode(self, payload: bytes) -> PixelBuffer:
        """Decode bytes with Pillow, raising LoadError on failure."""
        if not payload:
            msg = "Composite image payload is empty"
            raise LoadError(msg)
        try:
            with Image.open(io.BytesIO(payload)) as img:
                img.load()
                return PixelBuffer.from_image(img)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            msg = f"Error decoding composite image: {e!s}"
            raise LoadError(msg) from e

    def encode(self, pixels: PixelBuffer) -> bytes:
        """Encode the buffer in the configured format."""
        out = io.BytesIO()
        pixels.to_image().save(out, format=self.format)
        return out.getvalue()


def _decode_data_url(url: str) -> bytes:
    """Return the payload of a base64 ``data:`` URL."""
    header, sep, body = url.partition(",")
    if not sep or not header.endswith(";base64"):
        msg = "Only base64 data URLs are supported"
        raise LoadError(msg)
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        msg = f"Malformed data URL payload: {e!s}"
        raise LoadError(msg) from e


def read_source(source: bytes | str | Path) -> bytes:
    """
    Resolve a composite image source into encoded bytes.

    Accepts raw bytes, a base64 ``data:`` URL, or a local file path.
    Remote URLs are rejected; fetching them is the caller's job.

    Raises:
        LoadError: If the source cannot be read.

    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    text = str(source)
    if isinstance(source, str) and text.startswith(_DATA_URL_PREFIX):
        return _decode_data_url(text)
    if text.startswith(_REMOTE_PREFIXES):
        msg = f"Remote sources must be fetched by the caller: '{text}'"
        raise LoadError(msg)

    path = Path(source)
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        msg = f"Composite image not found: '{path}'"
        raise LoadError(msg) from e
    except OSError as e:
        msg = f"Error reading composite image '{path}': {e!s}"
        raise LoadError(msg) from e


def load_composite(
    source: bytes | str | Path,
    codec: ImageCodec | None = None,
) -> PixelBuffer:
    """Read and decode a composite image into an RGBA buffer."""
    payload = read_source(source)
    pixels = (codec or PillowCodec()).decode(payload)
    logger.debug("Loaded composite image %dx%d", pixels.width, pixels.height)
    return pixels
