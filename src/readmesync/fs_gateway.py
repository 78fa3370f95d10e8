"""File reads and writes for READMEs, templates and entrypoints."""

from __future__ import annotations

from pathlib import Path

from .errors import ReadmeIoError


def read_text_file(path_abs: Path) -> str:
    # newline="" keeps \r\n intact so rendered text matches the source.
    try:
        with path_abs.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ReadmeIoError(f"Failed to read file: {path_abs}: {exc}") from exc


def read_optional_bytes_file(path_abs: Path) -> bytes | None:
    """Existing READMEs are compared and appended to as raw bytes, never decoded."""
    if not path_abs.exists():
        return None
    try:
        return path_abs.read_bytes()
    except OSError as exc:
        raise ReadmeIoError(f"Failed to read file: {path_abs}: {exc}") from exc


def write_bytes_file(path_abs: Path, data: bytes) -> None:
    try:
        path_abs.write_bytes(data)
    except OSError as exc:
        raise ReadmeIoError(f"Failed to write file: {path_abs}: {exc}") from exc
