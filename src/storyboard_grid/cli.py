"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

import storyboard_grid.config as sg_config
from storyboard_grid.constants import ASPECT_COMPONENTS, RESOLUTION_PRESETS
from storyboard_grid.logging_utils import logger
from storyboard_grid.planning import compute_grid, validate_scene_count
from storyboard_grid.prompting import (
    CharacterHint,
    build_instruction,
    style_tokens_from_preset,
)
from storyboard_grid.runtime import (
    resolve_project_version,
    save_split_results,
    setup_output_directory,
)
from storyboard_grid.splitting import LoadError, split_storyboard_image

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

_GRID_FIELDS = ("aspect_ratio", "resolution", "scene_count")
_SPLIT_FIELDS = (
    "threshold", "filter_empty", "expected_cols", "expected_rows",
    "edge_margin_percent", "strategy",
)


def _add_grid_arguments(p: argparse.ArgumentParser) -> None:
    grid = p.add_argument_group("grid")
    grid.add_argument(
        "--scenes", dest="scene_count", type=int, default=None,
        help="Number of scenes on the storyboard")
    grid.add_argument(
        "--aspect", dest="aspect_ratio", choices=list(ASPECT_COMPONENTS),
        default=None, help="Panel and canvas aspect ratio")
    grid.add_argument(
        "--resolution", choices=list(RESOLUTION_PRESETS), default=None,
        help="Resolution tier of the composite canvas")
    p.add_argument(
        "--config", type=str, default=None,
        help="Path to a storyboard TOML config file")


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog="storyboard-grid",
        description="Plan, prompt and split storyboard contact sheets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  storyboard-grid plan --scenes 12 --aspect 16:9\n"
            "  storyboard-grid prompt --scenes 9 --story-file story.txt\n"
            "  storyboard-grid split --image sheet.png --scenes 9 "
            "--out panels\n"
        ),
    )
    p.add_argument(
        "--version", action="version",
        version=f"%(prog)s {resolve_project_version()}")
    p.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log per-panel details")
    sub = p.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="Show the grid chosen for a scene count")
    _add_grid_arguments(plan)

    prompt = sub.add_parser(
        "prompt", help="Build the generation instruction for a storyboard")
    _add_grid_arguments(prompt)
    story = prompt.add_mutually_exclusive_group(required=True)
    story.add_argument("--story", type=str, help="Story text")
    story.add_argument("--story-file", type=Path, help="Path to story text")
    prompt.add_argument(
        "--style-preset", type=str, default=None,
        help="Named style preset (e.g. ghibli, pixar, anime)")
    prompt.add_argument(
        "--character", action="append", default=[], metavar="NAME=TRAITS",
        help="Recurring character hint; may be repeated")
    prompt.add_argument(
        "--out", type=Path, default=None,
        help="Write the instruction to this file instead of stdout")

    split = sub.add_parser("split", help="Split a composite into panels")
    _add_grid_arguments(split)
    split.add_argument(
        "--image", type=Path, required=True, help="Composite image to split")
    split.add_argument(
        "--out", type=str, default=None, help="Output directory for panels")
    split.add_argument(
        "--strategy", choices=["fixed", "adaptive"], default=None,
        help="Boundary strategy (default: fixed)")
    split.add_argument(
        "--keep-empty", dest="filter_empty", action="store_const",
        const=False, default=None,
        help="Keep blank placeholder panels")
    split.add_argument(
        "--threshold", type=int, default=None,
        help="Color distance used to detect blank panels (0-765)")
    split.add_argument(
        "--edge-margin", dest="edge_margin_percent", type=float,
        default=None, help="Safety inset per side as a fraction, e.g. 0.005")
    split.add_argument(
        "--cols", dest="expected_cols", type=int, default=None,
        help="Override the planned column count")
    split.add_argument(
        "--rows", dest="expected_rows", type=int, default=None,
        help="Override the planned row count")
    return p


def _overrides(args: argparse.Namespace, fields: Sequence[str]) -> dict:
    """Return the CLI values that were explicitly provided."""
    return {
        f: getattr(args, f) for f in fields
        if getattr(args, f, None) is not None
    }


def build_config(args: argparse.Namespace) -> sg_config.StoryboardConfig:
    """Merge an optional TOML file with CLI overrides."""
    base = (
        sg_config.ConfigLoader.load(args.config)
        if args.config
        else sg_config.StoryboardConfig()
    )
    data = base.model_dump()
    data["grid"].update(_overrides(args, _GRID_FIELDS))
    data["split"].update(_overrides(args, _SPLIT_FIELDS))
    if getattr(args, "style_preset", None):
        data["prompt"]["style_preset"] = args.style_preset
        data["prompt"]["style_tokens"] = None
    if getattr(args, "out", None) is not None and args.command == "split":
        data["output"]["output"] = args.out
    return sg_config.StoryboardConfig.model_validate(data)


def _parse_character(text: str) -> CharacterHint:
    name, _, traits = text.partition("=")
    if not name.strip():
        msg = f"Character hint needs a name: '{text}'"
        raise ValueError(msg)
    return CharacterHint(name=name.strip(), visual_traits=traits.strip())


def run_plan(cfg: sg_config.StoryboardConfig) -> int:
    """Print the planned grid and the scene-count check."""
    g = cfg.grid
    grid = compute_grid(g.scene_count, g.aspect_ratio, g.resolution)
    check = validate_scene_count(g.scene_count, g.resolution)
    print(  # noqa: T201
        f"{grid.cols}x{grid.rows} grid on {grid.canvas_width}x"
        f"{grid.canvas_height} canvas, cells {grid.cell_width}x"
        f"{grid.cell_height}, {grid.empty_cells} empty",
    )
    if not check.is_valid:
        logger.warning(check.message)
        return 1
    return 0


def run_prompt(
    cfg: sg_config.StoryboardConfig,
    args: argparse.Namespace,
) -> int:
    """Build the instruction and print or save it."""
    story = (
        args.story_file.read_text(encoding="utf-8")
        if args.story_file is not None
        else args.story
    )
    tokens = (
        cfg.prompt.style_tokens
        if cfg.prompt.style_tokens is not None
        else style_tokens_from_preset(cfg.prompt.style_preset)
    )
    characters = [_parse_character(c) for c in args.character]
    g = cfg.grid
    text = build_instruction(
        story,
        aspect_ratio=g.aspect_ratio,
        resolution=g.resolution,
        scene_count=g.scene_count,
        style_tokens=tokens,
        characters=characters,
    )
    if args.out is None:
        print(text)  # noqa: T201
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text, encoding="utf-8")
        logger.info("Instruction saved to: %s", args.out)
    return 0


def run_split(cfg: sg_config.StoryboardConfig, image: Path) -> int:
    """Split the composite and write each panel to the output directory."""
    g = cfg.grid
    results = split_storyboard_image(
        image,
        aspect_ratio=g.aspect_ratio,
        resolution=g.resolution,
        scene_count=g.scene_count,
        options=cfg.split,
    )
    out_dir = setup_output_directory(cfg.output.output)
    save_split_results(results, out_dir)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse command-line arguments and run the selected command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logger.setLevel(logging.DEBUG)

    try:
        cfg = build_config(args)
    except (FileNotFoundError, ValidationError) as exc:
        parser.error(str(exc))

    try:
        if args.command == "plan":
            return run_plan(cfg)
        if args.command == "prompt":
            return run_prompt(cfg, args)
        return run_split(cfg, args.image)
    except LoadError as exc:
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        parser.error(str(exc))
    return 0


__all__ = ["build_arg_parser", "build_config", "main"]
