"""
Configuration schema and loader for the storyboard grid engine.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support.
"""

from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, model_validator

from storyboard_grid.config_defaults import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_EDGE_MARGIN_PERCENT,
    DEFAULT_FILTER_EMPTY,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_RESOLUTION,
    DEFAULT_SCENE_COUNT,
    DEFAULT_STRATEGY,
    DEFAULT_STYLE_PRESET,
    DEFAULT_THRESHOLD,
    MAX_EDGE_MARGIN_PERCENT,
)
from storyboard_grid.type_defs import AspectRatio, ResolutionTier, StrategyName


class GridSection(BaseModel):
    """Describe the storyboard grid requested from the planner."""

    aspect_ratio: AspectRatio = Field(DEFAULT_ASPECT_RATIO)
    resolution: ResolutionTier = Field(DEFAULT_RESOLUTION)
    scene_count: int = Field(DEFAULT_SCENE_COUNT)


class SplitOptions(BaseModel):
    """
    Tuning knobs for decomposing a composite image into panels.

    ``threshold`` is the summed RGB distance used by empty-cell
    detection. ``expected_cols``/``expected_rows`` override the grid
    shape taken from the planner. ``edge_margin_percent`` is the safety
    inset applied to every side of a corrected panel. ``strategy``
    selects fixed uniform cells or content-adaptive boundary detection.
    """

    threshold: int = Field(DEFAULT_THRESHOLD, ge=0, le=765)
    filter_empty: bool = DEFAULT_FILTER_EMPTY
    expected_cols: int | None = Field(None, ge=1)
    expected_rows: int | None = Field(None, ge=1)
    edge_margin_percent: float = Field(
        DEFAULT_EDGE_MARGIN_PERCENT,
        ge=0.0,
        le=MAX_EDGE_MARGIN_PERCENT,
    )
    strategy: StrategyName = Field(DEFAULT_STRATEGY)


class PromptSection(BaseModel):
    """Control the generation instruction sent to the image provider."""

    style_preset: str = Field(DEFAULT_STYLE_PRESET)
    style_tokens: list[str] | None = None

    @model_validator(mode="after")
    def _strip_tokens(self) -> "PromptSection":
        if self.style_tokens is not None:
            self.style_tokens = [
                t.strip() for t in self.style_tokens if t.strip()
            ]
        return self


class OutputSection(BaseModel):
    """Configure where split panels are written."""

    output: str = Field(DEFAULT_OUTPUT_DIR)


class StoryboardConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of a storyboard TOML file, grouping related
    parameters under logical categories.
    """

    grid: GridSection = Field(
        default_factory=lambda: GridSection.model_validate({}),
    )
    split: SplitOptions = Field(
        default_factory=lambda: SplitOptions.model_validate({}),
    )
    prompt: PromptSection = Field(
        default_factory=lambda: PromptSection.model_validate({}),
    )
    output: OutputSection = Field(
        default_factory=lambda: OutputSection.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> StoryboardConfig:
        """
        Load a storyboard configuration from a TOML file.

        Returns a validated StoryboardConfig instance based on the file
        contents.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return StoryboardConfig.model_validate(doc.unwrap())
