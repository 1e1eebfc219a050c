"""
Content-adaptive boundary detection for composite images.

Rows and columns inside a panel carry pixel-to-pixel variation; flat
gutters and injected green separator lines do not. Profiling that
variation along each axis yields the panel spans.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from storyboard_grid.constants import (
    DETECTION_PROXY_WIDTH,
    ENERGY_SAMPLE_STRIDE,
    SEGMENT_MAX_FRACTION,
    SEGMENT_MEAN_FRACTION,
    SEGMENT_MIN_GAP_FRACTION,
    SEGMENT_MIN_GAP_PX,
    SEGMENT_MIN_SIZE_FRACTION,
    SEPARATOR_GREEN_MIN,
    SEPARATOR_RATIO,
    SEPARATOR_RED_BLUE_MAX,
)
from storyboard_grid.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from storyboard_grid.splitting.buffer import PixelBuffer
    from storyboard_grid.type_defs import Axis


@dataclass(frozen=True)
class Segment:
    """Contiguous high-energy span along one axis, end exclusive."""

    start: int
    end: int
    size: int


@dataclass(frozen=True)
class Span:
    """Segment mapped back to source image coordinates."""

    start: float
    size: float


@dataclass(frozen=True)
class DetectedGrid:
    """Row and column spans found by adaptive detection."""

    rows: list[Span]
    cols: list[Span]


def separator_mask(rgb: np.ndarray) -> np.ndarray:
    """Return True where a pixel matches the bright green separator."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return (
        (g > SEPARATOR_GREEN_MIN)
        & (r < SEPARATOR_RED_BLUE_MAX)
        & (b < SEPARATOR_RED_BLUE_MAX)
    )


def energy_profile(
    pixels: PixelBuffer,
    axis: Axis,
    stride: int = ENERGY_SAMPLE_STRIDE,
) -> np.ndarray:
    """
    Compute a per-row (``"y"``) or per-column (``"x"``) energy profile.

    Each entry sums |dR| + |dG| + |dB| between samples ``stride`` apart
    along the line. Lines where more than 30% of samples are separator
    green score exactly zero.
    """
    rgb = pixels.rgb()
    # Lay every profiled line out along axis 0, samples along axis 1.
    lines = rgb if axis == "y" else rgb.transpose(1, 0, 2)
    length, span = lines.shape[0], lines.shape[1]

    idx = np.arange(stride, span, stride)
    if idx.size == 0:
        return np.zeros(length, dtype=np.float64)

    current = lines[:, idx]
    previous = lines[:, idx - stride]
    profile = np.abs(current - previous).sum(axis=(1, 2)).astype(np.float64)

    green_ratio = separator_mask(current).mean(axis=1)
    # Strictly above the ratio; a line at exactly 30% green keeps its energy.
    profile[green_ratio > SEPARATOR_RATIO] = 0.0
    return profile


def _uniform_segments(length: int, count: int) -> list[Segment]:
    step = length / count
    segments = []
    for i in range(count):
        start = math.floor(i * step)
        end = math.floor((i + 1) * step)
        segments.append(Segment(start, end, end - start))
    return segments


def _scan_segments(profile: np.ndarray, threshold: float) -> list[Segment]:
    """
    Split a profile into runs above ``threshold``.

    A low run ends the current segment only once it is at least the
    minimum gap wide; shorter dips are absorbed into the segment.
    """
    length = int(profile.shape[0])
    min_gap = max(SEGMENT_MIN_GAP_PX, math.floor(length * SEGMENT_MIN_GAP_FRACTION))

    segments: list[Segment] = []
    in_segment = False
    start = 0
    gap_start = -1

    for i in range(length):
        if profile[i] > threshold:
            if not in_segment:
                # A leading dip narrower than min_gap joins the first segment.
                if gap_start < 0 or i - gap_start >= min_gap:
                    start = i
                in_segment = True
            gap_start = -1
        elif in_segment:
            if gap_start < 0:
                gap_start = i
            if i - gap_start >= min_gap:
                in_segment = False
                segments.append(Segment(start, gap_start, gap_start - start))
        elif gap_start < 0:
            gap_start = i

    if in_segment:
        segments.append(Segment(start, length, length - start))
    return segments


def find_segments(
    profile: np.ndarray,
    expected: int | None = None,
) -> list[Segment]:
    """
    Find distinct content spans in an energy profile.

    The threshold adapts to the profile: the smaller of 2% of the peak
    and 30% of the mean. Spans no larger than 3% of the axis are noise.
    With ``expected`` set, surplus spans are pruned to the largest ones
    and a shortfall is replaced by a uniform subdivision.
    """
    length = int(profile.shape[0])
    if length == 0:
        return []

    max_val = float(profile.max())
    mean_val = float(profile.mean())
    threshold = min(max_val * SEGMENT_MAX_FRACTION, mean_val * SEGMENT_MEAN_FRACTION)

    min_size = length * SEGMENT_MIN_SIZE_FRACTION
    segments = [
        s for s in _scan_segments(profile, threshold) if s.size > min_size
    ]

    if expected and len(segments) > expected:
        largest = sorted(segments, key=lambda s: s.size, reverse=True)[:expected]
        segments = sorted(largest, key=lambda s: s.start)

    if expected and len(segments) < expected:
        logger.debug(
            "Found %d segments, expected %d; using uniform split.",
            len(segments), expected,
        )
        segments = _uniform_segments(length, expected)

    return segments


def _working_copy(pixels: PixelBuffer) -> tuple[PixelBuffer, float]:
    """Downscale wide images to the proxy width; never upscale."""
    if pixels.width <= DETECTION_PROXY_WIDTH:
        return pixels, 1.0
    scale = DETECTION_PROXY_WIDTH / pixels.width
    work_h = max(1, math.floor(pixels.height * scale))
    work = pixels.resize(
        (DETECTION_PROXY_WIDTH, work_h), Image.Resampling.BILINEAR,
    )
    return work, scale


def detect_grid(
    pixels: PixelBuffer,
    expected_cols: int | None = None,
    expected_rows: int | None = None,
) -> DetectedGrid | None:
    """
    Detect the grid structure of a composite from its content.

    Returns spans in source image coordinates, or None when either axis
    produced no span at all.
    """
    work, scale = _working_copy(pixels)
    sx = work.width / pixels.width if scale != 1.0 else 1.0
    sy = work.height / pixels.height if scale != 1.0 else 1.0

    row_segments = find_segments(energy_profile(work, "y"), expected_rows)
    col_segments = find_segments(energy_profile(work, "x"), expected_cols)

    if not row_segments or not col_segments:
        logger.debug("Adaptive detection found no usable spans")
        return None

    return DetectedGrid(
        rows=[Span(s.start / sy, s.size / sy) for s in row_segments],
        cols=[Span(s.start / sx, s.size / sx) for s in col_segments],
    )
