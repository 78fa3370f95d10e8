"""Format-preserving edits of package manifests."""

from __future__ import annotations

from collections.abc import MutableMapping
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .constants import README_FILENAME
from .errors import ManifestUpdateError


def set_readme_field(manifest_path_abs: Path, readme_name: str = README_FILENAME) -> bool:
    """Set `package.readme`; returns True when the manifest file was rewritten."""
    try:
        with manifest_path_abs.open("r", encoding="utf-8", newline="") as handle:
            original_text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestUpdateError(f"Failed to read manifest: {manifest_path_abs}") from exc

    try:
        document = tomlkit.parse(original_text)
    except TOMLKitError as exc:
        raise ManifestUpdateError(f"Invalid manifest TOML: {manifest_path_abs}: {exc}") from exc

    package_table = document.get("package")
    if not isinstance(package_table, MutableMapping):
        raise ManifestUpdateError(f"Manifest has no [package] table: {manifest_path_abs}")

    if package_table.get("readme") == readme_name:
        return False

    package_table["readme"] = readme_name
    updated_text = tomlkit.dumps(document)

    try:
        with manifest_path_abs.open("w", encoding="utf-8", newline="") as handle:
            handle.write(updated_text)
    except OSError as exc:
        raise ManifestUpdateError(f"Failed to write manifest: {manifest_path_abs}") from exc
    return True
