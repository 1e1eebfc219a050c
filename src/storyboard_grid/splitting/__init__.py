"""
Composite decomposition split into buffers, codecs, detection and cells.

The package re-exports the entry points most callers need so they do
not have to know which submodule holds each helper.
"""

from __future__ import annotations

from . import buffer, cells, codec, decomposer, energy, strategies
from .buffer import PixelBuffer, Rect
from .cells import (
    PanelCrop,
    apply_safety_inset,
    crop_edge_margin,
    fit_to_aspect,
    is_cell_empty,
    plan_panel_crop,
    trim_borders,
)
from .codec import ImageCodec, LoadError, PillowCodec, load_composite
from .decomposer import (
    CancellationToken,
    DecompositionCancelled,
    ImageDecomposer,
    SourceRect,
    SplitResult,
    split_storyboard_image,
)
from .energy import DetectedGrid, Segment, detect_grid, energy_profile, find_segments
from .strategies import (
    AdaptiveGridStrategy,
    BoundaryStrategy,
    CellBounds,
    FixedGridStrategy,
    strategy_for,
)

__all__ = [
    "AdaptiveGridStrategy",
    "BoundaryStrategy",
    "CancellationToken",
    "CellBounds",
    "DecompositionCancelled",
    "DetectedGrid",
    "FixedGridStrategy",
    "ImageCodec",
    "ImageDecomposer",
    "LoadError",
    "PanelCrop",
    "PillowCodec",
    "PixelBuffer",
    "Rect",
    "Segment",
    "SourceRect",
    "SplitResult",
    "apply_safety_inset",
    "buffer",
    "cells",
    "codec",
    "crop_edge_margin",
    "decomposer",
    "detect_grid",
    "energy",
    "energy_profile",
    "find_segments",
    "fit_to_aspect",
    "is_cell_empty",
    "load_composite",
    "plan_panel_crop",
    "split_storyboard_image",
    "strategies",
    "trim_borders",
]
