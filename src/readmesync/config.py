"""Sync settings: defaults, workspace metadata, then CLI overrides."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .constants import DEFAULT_DOC_BASE_URL, DEFAULT_TEMPLATE_NAME, SETTINGS_TABLE_NAME
from .errors import ConfigError
from .models import SyncSettings

_DOC_URL_KEY = "default-doc-url"
_TEMPLATE_KEY = "template"


def load_sync_settings(
    *,
    root_manifest_data: Mapping[str, Any],
    doc_base_url_override: str | None = None,
) -> SyncSettings:
    """Build settings from `[workspace.metadata.readmesync]` and an optional override.

    A root crate without a workspace may use `[package.metadata.readmesync]`.
    """
    table = _find_settings_table(root_manifest_data)

    default_doc_base_url = _optional_str(table, _DOC_URL_KEY) or DEFAULT_DOC_BASE_URL
    template_name = _optional_str(table, _TEMPLATE_KEY) or DEFAULT_TEMPLATE_NAME

    if doc_base_url_override is not None:
        if doc_base_url_override.strip() == "":
            raise ConfigError("--doc-base-url must not be empty")
        default_doc_base_url = doc_base_url_override

    if "/" in template_name or "\\" in template_name:
        raise ConfigError(f"Template name must be a bare file name: {template_name!r}")

    return SyncSettings(
        default_doc_base_url=default_doc_base_url,
        template_name=template_name,
    )


def _find_settings_table(root_manifest_data: Mapping[str, Any]) -> Mapping[str, Any]:
    for section in ("workspace", "package"):
        metadata = _as_table(root_manifest_data.get(section, {}), section).get("metadata", {})
        table = _as_table(metadata, f"{section}.metadata").get(SETTINGS_TABLE_NAME)
        if table is not None:
            return _as_table(table, f"{section}.metadata.{SETTINGS_TABLE_NAME}")
    return {}


def _as_table(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _optional_str(table: Mapping[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or value.strip() == "":
        raise ConfigError(f"{SETTINGS_TABLE_NAME}.{key} must be a non-empty string")
    return value
