"""Per-panel geometry corrections and pixel-level panel checks."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from storyboard_grid.config_defaults import (
    DEFAULT_EDGE_CROP_PERCENT,
    DEFAULT_THRESHOLD,
    DEFAULT_TRIM_THRESHOLD,
)
from storyboard_grid.constants import (
    ASPECT_TOLERANCE,
    EDGE_CROP_MIN_PX,
    EMPTY_SAMPLE_GRID,
    EMPTY_UNIFORM_RATIO,
    NEAR_BLACK_MAX,
)
from storyboard_grid.splitting.buffer import PixelBuffer, Rect


@dataclass(frozen=True)
class PanelCrop:
    """
    Where to read a panel from and how large to write it.

    ``source`` is in composite image coordinates and already includes
    ratio correction and the safety inset. ``output_size`` strictly
    matches the target ratio.
    """

    source: Rect
    output_size: tuple[int, int]


def fit_to_aspect(
    cell: Rect,
    target_ratio: float,
) -> tuple[Rect, tuple[int, int]]:
    """
    Center-crop a cell to the target ratio and derive the output size.

    Returns the corrected rectangle and an output (width, height) that
    satisfies the ratio exactly after rounding: landscape targets round
    the height from the width, portrait targets the width from the
    height.
    """
    w, h = cell.size()
    if w <= 0 or h <= 0:
        msg = f"Cell must have a positive size, got {w}x{h}"
        raise ValueError(msg)

    raw_ratio = w / h
    crop = cell
    if abs(raw_ratio - target_ratio) < ASPECT_TOLERANCE:
        out_w, out_h = w, h
    elif raw_ratio > target_ratio:
        crop_w = max(1, math.floor(h * target_ratio))
        crop = Rect.from_size(cell.x0 + (w - crop_w) // 2, cell.y0, crop_w, h)
        out_w, out_h = crop_w, h
    else:
        crop_h = max(1, math.floor(w / target_ratio))
        crop = Rect.from_size(cell.x0, cell.y0 + (h - crop_h) // 2, w, crop_h)
        out_w, out_h = w, crop_h

    if target_ratio >= 1.0:
        out_h = max(1, round(out_w / target_ratio))
    else:
        out_w = max(1, round(out_h * target_ratio))
    return crop, (out_w, out_h)


def apply_safety_inset(rect: Rect, margin_percent: float) -> Rect:
    """
    Shrink a rectangle symmetrically by a fraction of its size.

    The inset is skipped when it would leave nothing to sample.
    """
    if margin_percent <= 0:
        return rect
    margin_w = math.floor(rect.w * margin_percent)
    margin_h = math.floor(rect.h * margin_percent)
    if rect.w - 2 * margin_w <= 0 or rect.h - 2 * margin_h <= 0:
        return rect
    return rect.inset(margin_w, margin_h)


def plan_panel_crop(
    cell: Rect,
    target_ratio: float,
    margin_percent: float,
) -> PanelCrop:
    """Combine ratio correction and safety inset for one cell."""
    corrected, output_size = fit_to_aspect(cell, target_ratio)
    return PanelCrop(
        source=apply_safety_inset(corrected, margin_percent),
        output_size=output_size,
    )


def is_cell_empty(
    pixels: PixelBuffer,
    threshold: int = DEFAULT_THRESHOLD,
) -> bool:
    """
    Return True for a panel that is an intentionally blank placeholder.

    Samples a coarse grid of about 10x10 positions and compares each
    to the center pixel. The panel is empty only when the center is
    near black and more than 90% of samples are within ``threshold``
    (summed absolute RGB difference) of it.
    """
    w, h = pixels.size
    if w == 0 or h == 0:
        return True

    step_x = max(1, w // EMPTY_SAMPLE_GRID)
    step_y = max(1, h // EMPTY_SAMPLE_GRID)
    rgb = pixels.rgb()

    reference = rgb[h // 2, w // 2]
    if not bool(np.all(reference < NEAR_BLACK_MAX)):
        return False

    samples = rgb[::step_y, ::step_x]
    diff = np.abs(samples - reference).sum(axis=2)
    uniform_ratio = float(np.mean(diff < threshold))
    return uniform_ratio > EMPTY_UNIFORM_RATIO


def trim_borders(
    pixels: PixelBuffer,
    threshold: int = DEFAULT_TRIM_THRESHOLD,
) -> PixelBuffer:
    """
    Crop away a solid border whose color matches the top left pixel.

    Scans inward from every edge until a pixel differs from the
    background by more than ``threshold``. An image with no deviating
    pixel is returned unchanged.
    """
    rgb = pixels.rgb()
    background = rgb[0, 0]
    content = np.abs(rgb - background).sum(axis=2) > threshold

    rows = np.flatnonzero(content.any(axis=1))
    cols = np.flatnonzero(content.any(axis=0))
    if rows.size == 0 or cols.size == 0:
        return pixels

    return pixels.crop(Rect(
        int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1,
    ))


def crop_edge_margin(
    pixels: PixelBuffer,
    margin_percent: float = DEFAULT_EDGE_CROP_PERCENT,
) -> PixelBuffer:
    """
    Crop a fixed share off every edge to drop separator residue.

    Leaves the image unchanged when the result would be narrower or
    shorter than 50 pixels.
    """
    w, h = pixels.size
    margin_x = math.floor(w * margin_percent)
    margin_y = math.floor(h * margin_percent)
    new_w = w - 2 * margin_x
    new_h = h - 2 * margin_y
    if new_w < EDGE_CROP_MIN_PX or new_h < EDGE_CROP_MIN_PX:
        return pixels
    return pixels.crop(Rect.from_size(margin_x, margin_y, new_w, new_h))
