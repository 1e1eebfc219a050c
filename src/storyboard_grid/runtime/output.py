"""Helpers for managing output locations and persisted panels."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from storyboard_grid.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

    from storyboard_grid.splitting import SplitResult

_FALLBACK_DIR = "storyboard_panels"


def setup_output_directory(
    output_path: str,
    path_factory: Callable[[str], Path] = Path,
) -> Path:
    """
    Create the output directory if needed and return its resolved path.

    Falls back to ``storyboard_panels`` on failure to create the desired
    directory to keep the run from aborting.
    """
    resolved_path = path_factory(output_path)
    try:
        resolved_path.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.warning(
            "Could not create %s; writing to %s instead.",
            resolved_path, _FALLBACK_DIR,
        )
        fallback_path = path_factory(_FALLBACK_DIR)
        fallback_path.mkdir(parents=True, exist_ok=True)
        return fallback_path
    return resolved_path


def panel_path(output_dir: Path, result: SplitResult, suffix: str = ".png") -> Path:
    """Return the canonical file path for an accepted panel."""
    return output_dir / f"scene_{result.id + 1:02d}{suffix}"


def save_split_results(
    results: Sequence[SplitResult],
    output_dir: Path,
) -> list[Path]:
    """Write every panel's encoded bytes and return the written paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for result in results:
        target = panel_path(output_dir, result)
        target.write_bytes(result.image)
        written.append(target)
    logger.info("Saved %d panels to: %s", len(written), output_dir)
    return written
