"""README template lookup."""

from __future__ import annotations

from pathlib import Path

from .constants import DEFAULT_TEMPLATE_NAME


def find_readme_template(
    *,
    workspace_root_abs: Path,
    package_dir_abs: Path,
    template_name: str = DEFAULT_TEMPLATE_NAME,
) -> Path | None:
    """Find the nearest template, walking up from the package to the workspace root.

    The workspace root itself is checked; nothing above it is.
    """
    current_dir_abs = package_dir_abs
    while True:
        template_path_abs = current_dir_abs / template_name
        if template_path_abs.is_file():
            return template_path_abs

        parent_dir_abs = current_dir_abs.parent
        if current_dir_abs == workspace_root_abs or parent_dir_abs == current_dir_abs:
            return None
        if not _is_within(workspace_root_abs, parent_dir_abs):
            return None
        current_dir_abs = parent_dir_abs


def _is_within(ancestor: Path, descendant: Path) -> bool:
    try:
        descendant.relative_to(ancestor)
    except ValueError:
        return False
    return True
