"""Tests for generation instruction building."""

from __future__ import annotations

import logging

import pytest

from storyboard_grid.prompting import (
    STYLE_PRESETS,
    CharacterHint,
    build_instruction,
    build_regeneration_instruction,
    default_negative_prompt,
    style_tokens_from_preset,
)

STORY = "A fox crosses a frozen river at dawn."


def _panel_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.startswith("Panel [")]


def test_instruction_states_layout_and_panel_ratio() -> None:
    text = build_instruction(
        STORY, aspect_ratio="16:9", resolution="2K", scene_count=9,
    )
    assert "Generate a clean 3x3 storyboard grid with exactly 9 " \
        "equal-sized panels." in text
    assert "Overall Image Aspect Ratio: 16:9." in text
    assert "Each individual panel must have a 16:9 (horizontal landscape) " \
        "aspect ratio." in text
    assert "No borders between panels, no text, no watermarks" in text
    assert "Layout: 3 rows, 3 columns" in text
    assert STORY in text


def test_portrait_panel_ratio_label() -> None:
    text = build_instruction(
        STORY, aspect_ratio="9:16", resolution="2K", scene_count=6,
    )
    assert "Generate a clean 3x2 storyboard grid" in text
    assert "9:16 (vertical portrait)" in text


def test_one_line_per_panel_in_reading_order() -> None:
    text = build_instruction(
        STORY, aspect_ratio="16:9", resolution="2K", scene_count=12,
    )
    lines = _panel_lines(text)
    assert len(lines) == 12
    assert lines[0] == "Panel [row 1, col 1]: Scene 1 from story"
    assert lines[3] == "Panel [row 1, col 4]: Scene 4 from story"
    assert lines[4] == "Panel [row 2, col 1]: Scene 5 from story"
    assert lines[-1] == "Panel [row 3, col 4]: Scene 12 from story"
    assert "empty placeholder" not in text


def test_empty_cells_get_plain_placeholders() -> None:
    text = build_instruction(
        STORY, aspect_ratio="16:9", resolution="2K", scene_count=3,
    )
    lines = _panel_lines(text)
    assert len(lines) == 4
    assert lines[-1].startswith("Panel [row 2, col 2]: empty placeholder")
    assert "black background" in lines[-1]
    assert sum("empty placeholder" in line for line in lines) == 1


def test_characters_block() -> None:
    text = build_instruction(
        STORY,
        aspect_ratio="16:9",
        resolution="2K",
        scene_count=4,
        characters=[
            CharacterHint("Mika", "red scarf, silver hair"),
            CharacterHint("Old Fox"),
        ],
    )
    assert "<characters>" in text
    assert "Mika: red scarf, silver hair" in text
    assert "Old Fox: design based on name" in text
    assert text.index("</story_content>") < text.index("<characters>")


def test_style_line_only_when_tokens_given() -> None:
    plain = build_instruction(
        STORY, aspect_ratio="16:9", resolution="2K", scene_count=4,
    )
    styled = build_instruction(
        STORY,
        aspect_ratio="16:9",
        resolution="2K",
        scene_count=4,
        style_tokens=["anime", "soft colors"],
    )
    assert "Style:" not in plain
    assert "Style: anime, soft colors" in styled
    assert styled.splitlines()[-1].startswith("Negative constraints:")


def test_instruction_is_deterministic() -> None:
    kwargs = {
        "aspect_ratio": "9:16",
        "resolution": "4K",
        "scene_count": 17,
        "style_tokens": ["watercolor"],
    }
    assert build_instruction(STORY, **kwargs) == build_instruction(
        STORY, **kwargs,
    )
    assert build_regeneration_instruction(STORY, **kwargs) == \
        build_instruction(STORY, **kwargs)


def test_zero_scenes_yield_single_placeholder() -> None:
    text = build_instruction(
        STORY, aspect_ratio="16:9", resolution="2K", scene_count=0,
    )
    lines = _panel_lines(text)
    assert lines == [
        "Panel [row 1, col 1]: empty placeholder, "
        "solid plain black background",
    ]


def test_style_tokens_from_known_preset() -> None:
    tokens = style_tokens_from_preset("pixar")
    assert tokens[0] == "Pixar style"
    tokens.append("mutated")
    assert "mutated" not in STYLE_PRESETS["pixar"]


def test_unknown_preset_falls_back_to_ghibli(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.WARNING)
    tokens = style_tokens_from_preset("no-such-style")
    assert tokens == list(STYLE_PRESETS["ghibli"])
    assert "Unknown style preset" in caplog.text


def test_default_negative_prompt_mentions_layout_failures() -> None:
    negative = default_negative_prompt()
    assert "broken grid layout" in negative
    assert "white borders" in negative
