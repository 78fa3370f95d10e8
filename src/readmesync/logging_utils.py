"""Structured logging for readmesync runs."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

_LOGGER_NAME = "readmesync"

_LOG_PATH_FIELDS = {
    "workspace_root",
    "manifest_file",
    "readme_file",
    "template_file",
    "entrypoint_file",
    "log_file",
}

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "run_start": ["ts", "level", "command", "workspace_root", "package_count", "mode"],
    "run_stop": ["ts", "level", "command", "processed_count", "failed_count", "elapsed_ms"],
    "readme_checked": ["ts", "level", "result", "readme_file", "template_file"],
    "readme_generated": [
        "ts",
        "level",
        "result",
        "mode",
        "readme_file",
        "template_file",
        "byte_count",
    ],
    "readme_kept": ["ts", "level", "readme_file"],
    "manifest_updated": ["ts", "level", "manifest_file", "changed"],
    "run_aborted": ["ts", "level", "error_type", "error"],
    "package_failed": ["ts", "level", "error_type", "error"],
}
DEFAULT_EVENT_KEY_ORDER = ["ts", "level", "message"]


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_log_safe(v) for v in value]
    return str(value)


class StructuredTextFormatter(logging.Formatter):
    """Format log records as human-readable `=== event ===` blocks."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Blank line between entries, none after the last one.
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    @staticmethod
    def _ordered_keys(event_name: str, data: dict[str, Any]) -> list[str]:
        preferred = EVENT_KEY_ORDER.get(event_name, DEFAULT_EVENT_KEY_ORDER)
        preferred_present = [k for k in preferred if k in data and data[k] is not None]
        remaining = sorted(
            k for k in data.keys() if k not in preferred and data[k] is not None
        )
        return preferred_present + remaining

    @staticmethod
    def _header(event_name: str, package_name: Any) -> str:
        if package_name:
            return f"=== {event_name}: {package_name} ==="
        return f"=== {event_name} ==="

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {"level": record.levelname}

        message = record.getMessage()
        parsed = None
        if message.startswith("{") and message.endswith("}"):
            try:
                parsed = json.loads(message)
            except json.JSONDecodeError:
                parsed = None

        if isinstance(parsed, dict):
            base.update(parsed)
        else:
            base["message"] = message

        event_name = str(base.pop("event", record.name))
        # Per-package events carry the package in the header line.
        lines = [self._header(event_name, base.pop("package", None))]
        for key in self._ordered_keys(event_name, base):
            lines.append(f"{key}: {self._format_value(base[key])}")

        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        if key in _LOG_PATH_FIELDS and isinstance(value, (str, Path)) and str(value):
            value = str(Path(value).absolute())
        payload[key] = _to_log_safe(value)
    logging.getLogger(_LOGGER_NAME).log(
        level, json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    )


def setup_logging(log_file: Optional[str] = None) -> None:
    """Log to a file when one is given; otherwise keep logging silent."""
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_path), encoding="utf-8")
        handler.setFormatter(StructuredTextFormatter())
        logging.disable(logging.NOTSET)
        logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
    else:
        logging.disable(logging.CRITICAL)
