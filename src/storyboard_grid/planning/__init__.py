"""Grid layout planning: scene count, ratio and tier to a panel grid."""

from __future__ import annotations

from .grid import (
    OPTIMAL_LAYOUTS,
    GridConfig,
    ValidationResult,
    aspect_value,
    canvas_size,
    compute_grid,
    orientation_of,
    recommend_resolution,
    validate_scene_count,
)

__all__ = [
    "OPTIMAL_LAYOUTS",
    "GridConfig",
    "ValidationResult",
    "aspect_value",
    "canvas_size",
    "compute_grid",
    "orientation_of",
    "recommend_resolution",
    "validate_scene_count",
]
