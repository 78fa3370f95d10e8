"""Cargo workspace discovery and package selection."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from .config import load_sync_settings
from .constants import MANIFEST_FILENAME
from .errors import ConfigError, WorkspaceError
from .models import Package, Workspace

_GLOB_CHARS = frozenset("*?[")
_DEFAULT_VERSION = "0.0.0"


def load_workspace(
    *,
    workspace_root_abs: Path,
    doc_base_url_override: str | None = None,
) -> Workspace:
    workspace_root_abs = workspace_root_abs.resolve()
    root_manifest_abs = workspace_root_abs / MANIFEST_FILENAME
    if not root_manifest_abs.is_file():
        raise WorkspaceError(f"No {MANIFEST_FILENAME} found in {workspace_root_abs}")

    root_data = read_manifest_data(root_manifest_abs)
    settings = load_sync_settings(
        root_manifest_data=root_data,
        doc_base_url_override=doc_base_url_override,
    )

    workspace_table = _table(root_data, "workspace", root_manifest_abs)
    if "workspace" not in root_data and "package" not in root_data:
        raise WorkspaceError(
            f"{root_manifest_abs} has neither a [workspace] nor a [package] table"
        )

    inherited = _table(workspace_table, "package", root_manifest_abs)
    package_dirs_abs: list[Path] = []
    if "package" in root_data:
        package_dirs_abs.append(workspace_root_abs)
    package_dirs_abs.extend(
        _member_dirs(workspace_root_abs, workspace_table, root_manifest_abs)
    )

    packages: list[Package] = []
    seen_names: dict[str, Path] = {}
    for package_dir_abs in package_dirs_abs:
        manifest_abs = package_dir_abs / MANIFEST_FILENAME
        manifest_data = (
            root_data if manifest_abs == root_manifest_abs else read_manifest_data(manifest_abs)
        )
        package = _package_from_manifest(
            manifest_abs=manifest_abs,
            manifest_data=manifest_data,
            inherited=inherited,
        )
        if package.name in seen_names:
            raise WorkspaceError(
                f"Duplicate package name {package.name!r}: "
                f"{seen_names[package.name]} and {manifest_abs}"
            )
        seen_names[package.name] = manifest_abs
        packages.append(package)

    return Workspace(
        root_dir_abs=workspace_root_abs,
        manifest_path_abs=root_manifest_abs,
        packages=packages,
        settings=settings,
    )


def read_manifest_data(manifest_abs: Path) -> dict[str, Any]:
    try:
        with manifest_abs.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise WorkspaceError(f"Failed to read manifest: {manifest_abs}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise WorkspaceError(f"Invalid manifest TOML: {manifest_abs}: {exc}") from exc


def select_packages(
    workspace: Workspace, package_names: Iterable[str] | None
) -> list[Package]:
    """Keep workspace order; unknown names are a usage error."""
    if package_names is None:
        return list(workspace.packages)

    wanted = list(dict.fromkeys(package_names))
    known = set(workspace.package_names())
    unknown = [name for name in wanted if name not in known]
    if unknown:
        raise ConfigError(f"Unknown package(s): {', '.join(unknown)}")

    wanted_set = set(wanted)
    return [package for package in workspace.packages if package.name in wanted_set]


def skipped_package_names(
    packages: Iterable[Package],
    *,
    excluded_names: Iterable[str] = (),
    include_unpublished: bool = False,
) -> frozenset[str]:
    skipped = set(excluded_names)
    if not include_unpublished:
        skipped.update(package.name for package in packages if not package.publish)
    return frozenset(skipped)


def _member_dirs(
    workspace_root_abs: Path,
    workspace_table: Mapping[str, Any],
    root_manifest_abs: Path,
) -> list[Path]:
    members = _str_list(workspace_table, "members", root_manifest_abs)
    excluded = {
        (workspace_root_abs / pattern).resolve()
        for pattern in _str_list(workspace_table, "exclude", root_manifest_abs)
    }

    member_dirs_abs: list[Path] = []
    for member in members:
        if _GLOB_CHARS.intersection(member):
            candidates = sorted(
                path
                for path in workspace_root_abs.glob(member)
                if (path / MANIFEST_FILENAME).is_file()
            )
        else:
            candidate = workspace_root_abs / member
            if not (candidate / MANIFEST_FILENAME).is_file():
                raise WorkspaceError(
                    f"Workspace member {member!r} has no {MANIFEST_FILENAME}"
                )
            candidates = [candidate]

        for candidate in candidates:
            candidate_abs = candidate.resolve()
            if candidate_abs in excluded or candidate_abs == workspace_root_abs:
                continue
            if candidate_abs not in member_dirs_abs:
                member_dirs_abs.append(candidate_abs)

    return member_dirs_abs


def _package_from_manifest(
    *,
    manifest_abs: Path,
    manifest_data: Mapping[str, Any],
    inherited: Mapping[str, Any],
) -> Package:
    package_table = manifest_data.get("package")
    if not isinstance(package_table, Mapping):
        raise WorkspaceError(f"Manifest has no [package] table: {manifest_abs}")

    name = package_table.get("name")
    if not isinstance(name, str) or name == "":
        raise WorkspaceError(f"package.name must be a non-empty string: {manifest_abs}")

    version = _inheritable(package_table, inherited, "version", manifest_abs)
    license_name = _inheritable(package_table, inherited, "license", manifest_abs)
    documentation = _inheritable(package_table, inherited, "documentation", manifest_abs)
    publish = _inheritable(package_table, inherited, "publish", manifest_abs)

    return Package(
        name=name,
        root_dir_abs=manifest_abs.parent,
        manifest_path_abs=manifest_abs,
        version=_expect_str(version, "version", manifest_abs) or _DEFAULT_VERSION,
        license=_expect_str(license_name, "license", manifest_abs),
        documentation_url=_expect_str(documentation, "documentation", manifest_abs),
        publish=_is_published(publish, manifest_abs),
    )


def _inheritable(
    package_table: Mapping[str, Any],
    inherited: Mapping[str, Any],
    key: str,
    manifest_abs: Path,
) -> Any:
    value = package_table.get(key)
    if isinstance(value, Mapping):
        if value.get("workspace") is not True:
            raise WorkspaceError(f"package.{key} table must be {{ workspace = true }}: {manifest_abs}")
        if key not in inherited:
            raise WorkspaceError(
                f"package.{key} inherits from the workspace but "
                f"[workspace.package] has no {key}: {manifest_abs}"
            )
        return inherited[key]
    return value


def _expect_str(value: Any, key: str, manifest_abs: Path) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise WorkspaceError(f"package.{key} must be a string: {manifest_abs}")
    return value


def _is_published(value: Any, manifest_abs: Path) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, list):
        return len(value) > 0
    raise WorkspaceError(f"package.publish must be a boolean or a list: {manifest_abs}")


def _table(data: Mapping[str, Any], key: str, manifest_abs: Path) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise WorkspaceError(f"[{key}] must be a table: {manifest_abs}")
    return value


def _str_list(table: Mapping[str, Any], key: str, manifest_abs: Path) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise WorkspaceError(f"workspace.{key} must be a list of strings: {manifest_abs}")
    return value
