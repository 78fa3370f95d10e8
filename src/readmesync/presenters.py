"""User-facing text rendering."""

from __future__ import annotations

from .models import PackageOutcome, Workspace

_ERROR_PREFIX = "ERROR:"
_STATUS_SEPARATOR = ": "


def render_error(message: str) -> str:
    return f"{_ERROR_PREFIX} {message}"


def render_run_header(*, verb: str, workspace: Workspace, package_count: int) -> str:
    return f"{verb} READMEs for {package_count} package(s) in {workspace.root_dir_abs}"


def render_outcome(outcome: PackageOutcome) -> str:
    if outcome.error is not None:
        return render_error(str(outcome.error))
    return f"{outcome.package_name}{_STATUS_SEPARATOR}{outcome.result}"


def render_summary(outcomes: list[PackageOutcome]) -> str:
    failed_count = sum(1 for outcome in outcomes if outcome.failed)
    return f"{len(outcomes)} processed, {failed_count} failed"
