"""
Grid layout planning for storyboard composites.

Chooses a cols x rows partition for a scene count so that every panel
keeps the target aspect ratio and stays as large as the canvas allows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from storyboard_grid.constants import (
    ASPECT_COMPONENTS,
    RESOLUTION_PRESETS,
    SCENE_LIMITS,
)
from storyboard_grid.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from storyboard_grid.type_defs import (
        AspectRatio,
        Orientation,
        ResolutionTier,
    )


@dataclass(frozen=True)
class GridConfig:
    """Partition of a composite canvas into equally sized panels."""

    cols: int
    rows: int
    cell_width: int
    cell_height: int
    canvas_width: int
    canvas_height: int
    total_cells: int
    empty_cells: int


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a scene count against a resolution tier."""

    is_valid: bool
    limit: int
    message: str


@dataclass(frozen=True)
class _Layout:
    cols: int
    rows: int


# Hand-picked layouts for common counts. These keep panels close to the
# target ratio and avoid strip-like grids the generic search can pick.
OPTIMAL_LAYOUTS: MappingProxyType[int, MappingProxyType[str, _Layout]] = (
    MappingProxyType({
        # four-up contact sheet, same in both orientations
        4: MappingProxyType({
            "landscape": _Layout(2, 2), "portrait": _Layout(2, 2),
        }),
        # two full rows (columns) of three
        6: MappingProxyType({
            "landscape": _Layout(3, 2), "portrait": _Layout(2, 3),
        }),
        # two rows (columns) of four, no wasted cells
        8: MappingProxyType({
            "landscape": _Layout(4, 2), "portrait": _Layout(2, 4),
        }),
        # nine-grid, the most common storyboard sheet
        9: MappingProxyType({
            "landscape": _Layout(3, 3), "portrait": _Layout(3, 3),
        }),
        # two rows (columns) of five
        10: MappingProxyType({
            "landscape": _Layout(5, 2), "portrait": _Layout(2, 5),
        }),
        # 4x3 / 3x4; the search would otherwise settle on 6x2 / 2x6
        12: MappingProxyType({
            "landscape": _Layout(4, 3), "portrait": _Layout(3, 4),
        }),
    })
)


def orientation_of(aspect_ratio: AspectRatio) -> Orientation:
    """Return ``landscape`` for wide ratios and ``portrait`` otherwise."""
    w, h = ASPECT_COMPONENTS[aspect_ratio]
    return "landscape" if w >= h else "portrait"


def aspect_value(aspect_ratio: AspectRatio) -> float:
    """Return the width / height quotient of an aspect ratio label."""
    w, h = ASPECT_COMPONENTS[aspect_ratio]
    return w / h


def canvas_size(
    aspect_ratio: AspectRatio,
    resolution: ResolutionTier,
) -> tuple[int, int]:
    """Return the preset canvas (width, height) for a tier and ratio."""
    return RESOLUTION_PRESETS[resolution][aspect_ratio]


def _cell_size(
    aspect_ratio: AspectRatio,
    canvas: tuple[int, int],
    cols: int,
    rows: int,
) -> tuple[int, int]:
    """
    Derive ratio-preserving cell dimensions for a grid shape.

    Landscape grids take the cell width from the canvas width; portrait
    grids take the cell height from the canvas height. The other side
    follows from the ratio.
    """
    ratio_w, ratio_h = ASPECT_COMPONENTS[aspect_ratio]
    canvas_w, canvas_h = canvas
    if orientation_of(aspect_ratio) == "landscape":
        cell_w = canvas_w // cols
        return cell_w, cell_w * ratio_h // ratio_w
    cell_h = canvas_h // rows
    return cell_h * ratio_w // ratio_h, cell_h


def _make_config(
    aspect_ratio: AspectRatio,
    canvas: tuple[int, int],
    layout: _Layout,
    scene_count: int,
) -> GridConfig:
    cell_w, cell_h = _cell_size(aspect_ratio, canvas, layout.cols, layout.rows)
    total = layout.cols * layout.rows
    return GridConfig(
        cols=layout.cols,
        rows=layout.rows,
        cell_width=cell_w,
        cell_height=cell_h,
        canvas_width=canvas[0],
        canvas_height=canvas[1],
        total_cells=total,
        empty_cells=total - scene_count,
    )


def _search_layout(
    scene_count: int,
    aspect_ratio: AspectRatio,
    canvas: tuple[int, int],
) -> _Layout | None:
    """
    Search grid shapes that maximize the smaller panel side.

    Landscape iterates the column count, portrait the row count. A shape
    is rejected when it wastes a full row (column) of cells, when its
    ratio-preserving cells overflow the canvas, or when it runs against
    the canvas orientation.
    """
    landscape = orientation_of(aspect_ratio) == "landscape"
    canvas_w, canvas_h = canvas
    best: _Layout | None = None
    best_min_dim = 0

    for major in range(1, scene_count + 1):
        minor = math.ceil(scene_count / major)
        cols, rows = (major, minor) if landscape else (minor, major)

        if cols * rows - scene_count >= major:
            continue

        cell_w, cell_h = _cell_size(aspect_ratio, canvas, cols, rows)
        if landscape and cell_h * rows > canvas_h:
            continue
        if not landscape and cell_w * cols > canvas_w:
            continue

        if landscape and cols < rows:
            continue
        if not landscape and rows < cols:
            continue

        min_dim = min(cell_w, cell_h)
        if min_dim > best_min_dim:
            best_min_dim = min_dim
            best = _Layout(cols, rows)

    return best


def _square_layout(scene_count: int, aspect_ratio: AspectRatio) -> _Layout:
    """Return a near-square fallback shape for a scene count."""
    major = math.ceil(math.sqrt(scene_count))
    minor = math.ceil(scene_count / major)
    if orientation_of(aspect_ratio) == "landscape":
        return _Layout(major, minor)
    return _Layout(minor, major)


def compute_grid(
    scene_count: int,
    aspect_ratio: AspectRatio,
    resolution: ResolutionTier,
) -> GridConfig:
    """
    Compute the grid configuration for a storyboard composite.

    Never raises for any integer scene count. Zero or negative counts
    produce a single full-canvas cell marked empty.
    """
    canvas = canvas_size(aspect_ratio, resolution)
    canvas_w, canvas_h = canvas

    if scene_count <= 0:
        return GridConfig(
            cols=1, rows=1,
            cell_width=canvas_w, cell_height=canvas_h,
            canvas_width=canvas_w, canvas_height=canvas_h,
            total_cells=1, empty_cells=1,
        )
    if scene_count == 1:
        return GridConfig(
            cols=1, rows=1,
            cell_width=canvas_w, cell_height=canvas_h,
            canvas_width=canvas_w, canvas_height=canvas_h,
            total_cells=1, empty_cells=0,
        )

    orientation = orientation_of(aspect_ratio)
    curated = OPTIMAL_LAYOUTS.get(scene_count)
    if curated is not None:
        layout = curated[orientation]
        logger.debug(
            "Using curated layout for %d scenes: %dx%d (%s)",
            scene_count, layout.cols, layout.rows, aspect_ratio,
        )
        return _make_config(aspect_ratio, canvas, layout, scene_count)

    layout = _search_layout(scene_count, aspect_ratio, canvas)
    if layout is None:
        layout = _square_layout(scene_count, aspect_ratio)
        logger.debug(
            "No searched layout fits %d scenes; near-square %dx%d",
            scene_count, layout.cols, layout.rows,
        )
    return _make_config(aspect_ratio, canvas, layout, scene_count)


def validate_scene_count(
    scene_count: int,
    resolution: ResolutionTier,
) -> ValidationResult:
    """Check a scene count against the tier limit without raising."""
    limit = SCENE_LIMITS[resolution]
    is_valid = scene_count <= limit
    message = "" if is_valid else (
        f"Scene count {scene_count} exceeds the {resolution} limit of "
        f"{limit}. Switch to a higher resolution or reduce the scene count."
    )
    return ValidationResult(is_valid=is_valid, limit=limit, message=message)


def recommend_resolution(scene_count: int) -> ResolutionTier:
    """Return the smallest tier whose limit accommodates the count."""
    if scene_count <= SCENE_LIMITS["2K"]:
        return "2K"
    return "4K"
