"""
Defines shared type aliases for the storyboard grid engine.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from typing import Literal

AspectRatio = Literal["16:9", "9:16"]
ResolutionTier = Literal["2K", "4K"]
Axis = Literal["x", "y"]
StrategyName = Literal["fixed", "adaptive"]
Orientation = Literal["landscape", "portrait"]
