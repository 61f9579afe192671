"""Storage module for artifact file management."""

from .media import (
    build_file_stem,
    ensure_output_dir,
    get_artifact_path,
    sanitize_title,
)

__all__ = [
    "build_file_stem",
    "ensure_output_dir",
    "get_artifact_path",
    "sanitize_title",
]
