from __future__ import annotations

import pytest

from readmesync.config import load_sync_settings
from readmesync.constants import DEFAULT_DOC_BASE_URL, DEFAULT_TEMPLATE_NAME
from readmesync.errors import ConfigError


def test_defaults_when_no_settings_table() -> None:
    settings = load_sync_settings(root_manifest_data={"workspace": {"members": []}})

    assert settings.default_doc_base_url == DEFAULT_DOC_BASE_URL
    assert settings.template_name == DEFAULT_TEMPLATE_NAME


def test_workspace_metadata_overrides_defaults() -> None:
    data = {
        "workspace": {
            "metadata": {
                "readmesync": {
                    "default-doc-url": "https://docs.internal/",
                    "template": "README.template",
                }
            }
        }
    }

    settings = load_sync_settings(root_manifest_data=data)

    assert settings.default_doc_base_url == "https://docs.internal/"
    assert settings.template_name == "README.template"


def test_package_metadata_is_used_for_single_crate_roots() -> None:
    data = {
        "package": {
            "name": "solo",
            "metadata": {"readmesync": {"default-doc-url": "https://solo.docs/"}},
        }
    }

    assert load_sync_settings(root_manifest_data=data).default_doc_base_url == "https://solo.docs/"


def test_cli_override_wins_over_metadata() -> None:
    data = {"workspace": {"metadata": {"readmesync": {"default-doc-url": "https://a/"}}}}

    settings = load_sync_settings(
        root_manifest_data=data,
        doc_base_url_override="https://b/",
    )

    assert settings.default_doc_base_url == "https://b/"


@pytest.mark.parametrize(
    ("data", "override"),
    [
        ({"workspace": {"metadata": {"readmesync": {"default-doc-url": 3}}}}, None),
        ({"workspace": {"metadata": {"readmesync": {"template": ""}}}}, None),
        ({"workspace": {"metadata": {"readmesync": {"template": "a/README.tpl"}}}}, None),
        ({"workspace": {"metadata": {"readmesync": "nope"}}}, None),
        ({}, "   "),
    ],
)
def test_invalid_settings_raise_config_error(data: dict, override: str | None) -> None:
    with pytest.raises(ConfigError):
        load_sync_settings(root_manifest_data=data, doc_base_url_override=override)
