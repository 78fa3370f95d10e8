"""Dataclasses and enums shared across readmesync layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .constants import DEFAULT_DOC_BASE_URL, DEFAULT_TEMPLATE_NAME
from .errors import PackageSyncError


class CheckResult(Enum):
    SKIPPED = "Skipped"
    MISSING = "Missing"
    UPDATE_NEEDED = "Update needed"
    UP_TO_DATE = "Up-to-date"

    def __str__(self) -> str:
        return self.value


class GenerateMode(Enum):
    IF_MISSING = "if-missing"
    OVERWRITE = "overwrite"
    APPEND = "append"


class GenerateResult(Enum):
    SKIPPED = "Skipped"
    KEPT = "Kept existing"
    CREATED = "Created"
    OVERWRITTEN = "Overwritten"
    APPENDED = "Appended"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SyncSettings:
    default_doc_base_url: str = DEFAULT_DOC_BASE_URL
    template_name: str = DEFAULT_TEMPLATE_NAME


@dataclass(frozen=True)
class RenderFlags:
    add_title: bool = False
    add_license: bool = True
    indent_headings: bool = False


@dataclass(frozen=True)
class Package:
    name: str
    root_dir_abs: Path
    manifest_path_abs: Path
    version: str
    license: str | None = None
    documentation_url: str | None = None
    publish: bool = True


@dataclass(frozen=True)
class Workspace:
    root_dir_abs: Path
    manifest_path_abs: Path
    packages: list[Package]
    settings: SyncSettings

    def package_names(self) -> list[str]:
        return [package.name for package in self.packages]


@dataclass(frozen=True)
class PackageOutcome:
    package_name: str
    result: CheckResult | GenerateResult | None = None
    error: PackageSyncError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None
