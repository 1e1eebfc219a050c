"""Generation instruction building for storyboard composites."""

from __future__ import annotations

from .builder import (
    STYLE_PRESETS,
    CharacterHint,
    build_instruction,
    build_regeneration_instruction,
    default_negative_prompt,
    style_tokens_from_preset,
)

__all__ = [
    "STYLE_PRESETS",
    "CharacterHint",
    "build_instruction",
    "build_regeneration_instruction",
    "default_negative_prompt",
    "style_tokens_from_preset",
]
