"""
Generation instruction builder for storyboard composites.

The instruction states the exact grid the planner chose so that the
decomposer can cut the returned image with plain geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from storyboard_grid.config_defaults import DEFAULT_STYLE_PRESET
from storyboard_grid.logging_utils import logger
from storyboard_grid.planning import compute_grid, orientation_of

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from storyboard_grid.type_defs import AspectRatio, ResolutionTier


@dataclass(frozen=True, slots=True)
class CharacterHint:
    """Name and visual traits of a recurring character."""

    name: str
    visual_traits: str = ""


_PANEL_ASPECT_LABELS = MappingProxyType({
    "landscape": "horizontal landscape",
    "portrait": "vertical portrait",
})

STYLE_PRESETS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType({
    "ghibli": (
        "Studio Ghibli style", "anime", "soft colors", "hand-drawn",
        "whimsical",
    ),
    "miyazaki": (
        "Miyazaki style", "detailed backgrounds", "fantasy",
        "nature elements", "dreamlike",
    ),
    "disney": (
        "Disney animation style", "3D render", "vibrant colors",
        "expressive characters",
    ),
    "pixar": (
        "Pixar style", "3D animation", "detailed textures",
        "cinematic lighting",
    ),
    "cyberpunk": (
        "cyberpunk", "neon lights", "futuristic", "dark atmosphere",
        "high tech",
    ),
    "watercolor": (
        "watercolor painting", "soft edges", "artistic", "pastel colors",
        "fluid",
    ),
    "realistic": (
        "realistic", "photorealistic", "detailed", "lifelike",
        "high definition",
    ),
    "anime": (
        "anime style", "manga art", "2D animation", "cel shaded", "vibrant",
    ),
    "idealized_realism": (
        "idealized realism", "semi-realistic 2.5D illustration",
        "Unreal Engine 5 render quality", "volumetric lighting",
        "detailed material textures (metal, fabric, fire)",
        "cinematic atmosphere", "highly detailed", "between 2D and 3D",
    ),
})

_NEGATIVE_CONSTRAINTS = (
    "Negative constraints: text, watermark, split screen borders, "
    "speech bubbles, blur, distortion, bad anatomy."
)

_DEFAULT_NEGATIVE_PROMPT = (
    "white borders, black borders, thick frames, wide gaps, padding, "
    "margins, white background, blurry, low quality, watermark, any text, "
    "captions, subtitles, labels, numbers, timestamps/timecodes, "
    "inconsistent style between frames, broken grid layout, misaligned "
    "frames, merged frames, continuous image, full page image"
)


def _panel_position(index: int, cols: int) -> tuple[int, int]:
    """Return the 1-based (row, col) of a row-major panel index."""
    return index // cols + 1, index % cols + 1


def build_instruction(  # noqa: PLR0913
    story: str,
    *,
    aspect_ratio: AspectRatio,
    resolution: ResolutionTier,
    scene_count: int,
    style_tokens: Sequence[str] = (),
    characters: Sequence[CharacterHint] | None = None,
) -> str:
    """
    Build the text instruction for generating a storyboard composite.

    The grid comes from :func:`compute_grid` with the same arguments the
    decomposer will later use. Panel ratio is stated separately from the
    overall canvas ratio, and every unused cell is requested as a plain
    black placeholder so empty-cell filtering can drop it.
    """
    grid = compute_grid(scene_count, aspect_ratio, resolution)
    cols, rows = grid.cols, grid.rows
    panel_label = _PANEL_ASPECT_LABELS[orientation_of(aspect_ratio)]

    parts: list[str] = [
        "<instruction>",
        f"Generate a clean {rows}x{cols} storyboard grid with exactly "
        f"{grid.total_cells} equal-sized panels.",
        f"Overall Image Aspect Ratio: {aspect_ratio}.",
        f"Each individual panel must have a {aspect_ratio} ({panel_label}) "
        "aspect ratio.",
        "Structure: No borders between panels, no text, no watermarks, "
        "no speech bubbles.",
        "Consistency: Maintain consistent character appearance, lighting, "
        "and color grading across all panels.",
        "</instruction>",
        f"Layout: {rows} rows, {cols} columns, reading order left-to-right, "
        "top-to-bottom.",
        "<story_content>",
        story,
        "</story_content>",
    ]

    if characters:
        parts.append("<characters>")
        parts.extend(
            f"{c.name}: {c.visual_traits or 'design based on name'}"
            for c in characters
        )
        parts.append("</characters>")

    populated = max(0, scene_count)
    for idx in range(populated):
        row, col = _panel_position(idx, cols)
        parts.append(f"Panel [row {row}, col {col}]: Scene {idx + 1} from story")

    if grid.empty_cells > 0:
        for idx in range(populated, grid.total_cells):
            row, col = _panel_position(idx, cols)
            parts.append(
                f"Panel [row {row}, col {col}]: empty placeholder, "
                "solid plain black background",
            )

    if style_tokens:
        parts.append(f"Style: {', '.join(style_tokens)}")

    parts.append(_NEGATIVE_CONSTRAINTS)

    logger.debug(
        "Built instruction for %d scenes on a %dx%d grid (%d empty)",
        populated, cols, rows, grid.empty_cells,
    )
    return "\n".join(parts)


def build_regeneration_instruction(  # noqa: PLR0913
    story: str,
    *,
    aspect_ratio: AspectRatio,
    resolution: ResolutionTier,
    scene_count: int,
    style_tokens: Sequence[str] = (),
    characters: Sequence[CharacterHint] | None = None,
) -> str:
    """Build the instruction used when regenerating a storyboard."""
    return build_instruction(
        story,
        aspect_ratio=aspect_ratio,
        resolution=resolution,
        scene_count=scene_count,
        style_tokens=style_tokens,
        characters=characters,
    )


def style_tokens_from_preset(preset_id: str) -> list[str]:
    """Return style tokens for a preset id, defaulting to the Ghibli set."""
    tokens = STYLE_PRESETS.get(preset_id)
    if tokens is None:
        logger.warning(
            "Unknown style preset '%s'; using '%s'.",
            preset_id, DEFAULT_STYLE_PRESET,
        )
        tokens = STYLE_PRESETS[DEFAULT_STYLE_PRESET]
    return list(tokens)


def default_negative_prompt() -> str:
    """Return the default negative prompt for storyboard generation."""
    return _DEFAULT_NEGATIVE_PROMPT
