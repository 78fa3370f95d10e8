"""Pytest fixtures for readmesync tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from readmesync.models import Package, SyncSettings, Workspace

LIB_SOURCE = "\n".join(
    (
        "//! Fast widgets.",
        "//!",
        "//! See [Gadget](./struct.Gadget.html) and [serde](../serde_json/index.html).",
        "",
        "pub struct Gadget;",
        "",
    )
)


def write_package(
    root: Path,
    name: str,
    *,
    lib_source: str | None = LIB_SOURCE,
    main_source: str | None = None,
    extra_manifest: str = "",
) -> Path:
    package_dir = root / name
    (package_dir / "src").mkdir(parents=True, exist_ok=True)
    (package_dir / "Cargo.toml").write_text(
        "\n".join(
            (
                "[package]",
                f'name = "{name}"',
                'version = "0.1.0"',
                'license = "MIT"',
                extra_manifest,
                "",
            )
        ),
        encoding="utf-8",
    )
    if lib_source is not None:
        (package_dir / "src" / "lib.rs").write_text(lib_source, encoding="utf-8")
    if main_source is not None:
        (package_dir / "src" / "main.rs").write_text(main_source, encoding="utf-8")
    return package_dir


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo setup_logging() side effects between tests."""
    yield
    logging.disable(logging.NOTSET)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[..., Path]:
    """Create a workspace root with the given member names under crates/."""

    def _make(*names: str, root_extra: str = "") -> Path:
        root = tmp_path / "ws"
        crates = root / "crates"
        crates.mkdir(parents=True)
        (root / "Cargo.toml").write_text(
            "\n".join(
                (
                    "[workspace]",
                    'members = ["crates/*"]',
                    root_extra,
                    "",
                )
            ),
            encoding="utf-8",
        )
        for name in names:
            write_package(crates, name)
        return root

    return _make


def make_package(root_dir: Path, name: str = "my-crate", **overrides: object) -> Package:
    fields: dict[str, object] = {
        "name": name,
        "root_dir_abs": root_dir,
        "manifest_path_abs": root_dir / "Cargo.toml",
        "version": "0.1.0",
        "license": "MIT",
    }
    fields.update(overrides)
    return Package(**fields)  # type: ignore[arg-type]


def make_single_workspace(root_dir: Path, package: Package) -> Workspace:
    return Workspace(
        root_dir_abs=root_dir,
        manifest_path_abs=root_dir / "Cargo.toml",
        packages=[package],
        settings=SyncSettings(),
    )
