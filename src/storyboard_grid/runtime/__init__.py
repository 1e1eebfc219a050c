"""Runtime utilities for output persistence and version lookup."""

from .output import panel_path, save_split_results, setup_output_directory
from .version import resolve_project_version

__all__ = [
    "panel_path",
    "resolve_project_version",
    "save_split_results",
    "setup_output_directory",
]
