"""Tests for logging utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from readmesync.logging_utils import StructuredTextFormatter, log_event


def _record(msg: str, name: str = "readmesync") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_structured_formatter_orders_known_event_keys() -> None:
    formatter = StructuredTextFormatter()
    payload = {
        "ts": "2026-01-01T00:00:00+00:00",
        "event": "readme_checked",
        "zeta": "last",
        "result": "UP_TO_DATE",
        "package": "alpha",
    }

    result = formatter.format(_record(json.dumps(payload)))

    lines = result.splitlines()
    assert lines[0] == "=== readme_checked: alpha ==="
    assert "package: alpha" not in lines
    assert lines.index("level: INFO") < lines.index("result: UP_TO_DATE")
    assert lines[-1] == "zeta: last"


def test_structured_formatter_keeps_plain_header_without_package() -> None:
    formatter = StructuredTextFormatter()
    payload = {"event": "run_stop", "command": "check", "failed_count": 0}

    result = formatter.format(_record(json.dumps(payload)))

    assert result.splitlines()[:3] == [
        "=== run_stop ===",
        "level: INFO",
        "command: check",
    ]


def test_structured_formatter_wraps_plain_messages() -> None:
    formatter = StructuredTextFormatter()

    result = formatter.format(_record("plain\nmessage", name="other"))

    assert "=== other ===" in result
    assert "message: plain\\nmessage" in result


def test_structured_formatter_separates_entries_with_blank_line() -> None:
    formatter = StructuredTextFormatter()

    first = formatter.format(_record("one"))
    second = formatter.format(_record("two"))

    assert not first.startswith("\n")
    assert second.startswith("\n=== readmesync ===")


def test_log_event_emits_json_with_stringified_paths(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger="readmesync"):
        log_event("readme_kept", package="alpha", readme_file=Path("/tmp/x/README.md"))

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "readme_kept"
    assert payload["package"] == "alpha"
    assert payload["readme_file"] == str(Path("/tmp/x/README.md").absolute())
