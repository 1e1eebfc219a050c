"""Public package exports for the storyboard grid engine."""

from __future__ import annotations

from .config import SplitOptions, StoryboardConfig
from .planning import (
    GridConfig,
    ValidationResult,
    compute_grid,
    recommend_resolution,
    validate_scene_count,
)
from .prompting import CharacterHint, build_instruction
from .splitting import (
    CancellationToken,
    ImageDecomposer,
    LoadError,
    SplitResult,
    split_storyboard_image,
)

__all__ = [
    "CancellationToken",
    "CharacterHint",
    "GridConfig",
    "ImageDecomposer",
    "LoadError",
    "SplitOptions",
    "SplitResult",
    "StoryboardConfig",
    "ValidationResult",
    "build_instruction",
    "compute_grid",
    "recommend_resolution",
    "split_storyboard_image",
    "validate_scene_count",
]
