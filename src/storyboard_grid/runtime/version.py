"""Version lookup for the CLI ``--version`` flag."""

from __future__ import annotations

import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path

from storyboard_grid.logging_utils import logger

DISTRIBUTION_NAME = "storyboard-grid"
_DEV_VERSION = "0.0.0"


def _pyproject_version(start: Path) -> str | None:
    """Return project.version from the nearest pyproject.toml above start."""
    for parent in start.resolve().parents:
        candidate = parent / "pyproject.toml"
        if not candidate.is_file():
            continue
        try:
            with candidate.open("rb") as handle:
                project = tomllib.load(handle).get("project", {})
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Error reading %s: %s", candidate, exc)
            return None
        version = project.get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
        return None
    return None


def resolve_project_version() -> str:
    """
    Return the installed version, else the source tree's, else 0.0.0.

    Source checkouts run through ``pip install -e`` report the installed
    metadata; plain checkouts fall back to pyproject.toml.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass
    return _pyproject_version(Path(__file__)) or _DEV_VERSION
