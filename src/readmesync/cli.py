"""CLI entry and run wiring."""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from .errors import ReadmeOutdatedError, ReadmeSyncError
from .logging_utils import log_event, setup_logging
from .models import CheckResult, GenerateMode, PackageOutcome
from .presenters import render_error, render_outcome, render_run_header, render_summary
from .sync_service import (
    check_workspace_readmes,
    ensure_readme_current,
    generate_workspace_readmes,
)
from .workspace import load_workspace, select_packages, skipped_package_names


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log)

    started = time.monotonic()
    try:
        workspace = load_workspace(
            workspace_root_abs=Path(args.workspace),
            doc_base_url_override=args.doc_base_url,
        )
        packages = select_packages(workspace, args.package)
        skip_names = skipped_package_names(
            packages,
            excluded_names=args.exclude,
            include_unpublished=args.include_unpublished,
        )
        mode = GenerateMode(args.mode) if args.command == "generate" else None
        log_event(
            "run_start",
            command=args.command,
            workspace_root=workspace.root_dir_abs,
            package_count=len(packages),
            mode=mode.value if mode is not None else None,
        )

        print(
            render_run_header(
                verb="Checking" if mode is None else "Generating",
                workspace=workspace,
                package_count=len(packages),
            )
        )
        if mode is None:
            outcomes = check_workspace_readmes(
                workspace=workspace,
                packages=packages,
                skip_names=skip_names,
                fail_fast=args.fail_fast,
                on_outcome=_print_outcome,
            )
            exit_code = _report_stale_readmes(outcomes)
        else:
            outcomes = generate_workspace_readmes(
                workspace=workspace,
                packages=packages,
                mode=mode,
                skip_names=skip_names,
                fail_fast=args.fail_fast,
                on_outcome=_print_outcome,
            )
            exit_code = 0

        if any(outcome.failed for outcome in outcomes):
            exit_code = 1
        print(render_summary(outcomes))
    except ReadmeSyncError as exc:
        log_event(
            "run_aborted",
            level=logging.ERROR,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        print(render_error(str(exc)))
        return 1

    log_event(
        "run_stop",
        command=args.command,
        processed_count=len(outcomes),
        failed_count=sum(1 for outcome in outcomes if outcome.failed),
        elapsed_ms=int((time.monotonic() - started) * 1000),
    )
    return exit_code


def _print_outcome(outcome: PackageOutcome) -> None:
    print(render_outcome(outcome))


def _report_stale_readmes(outcomes: list[PackageOutcome]) -> int:
    exit_code = 0
    for outcome in outcomes:
        if not isinstance(outcome.result, CheckResult):
            continue
        try:
            ensure_readme_current(package_name=outcome.package_name, result=outcome.result)
        except ReadmeOutdatedError as exc:
            print(render_error(str(exc)))
            exit_code = 1
    return exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readmesync",
        description="Keep Cargo workspace READMEs in sync with crate-level doc comments.",
    )
    parser.add_argument(
        "--workspace",
        default=".",
        help="Workspace root directory holding the root Cargo.toml (default: current directory).",
    )
    parser.add_argument(
        "-p",
        "--package",
        action="append",
        help="Only process this package (repeatable).",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Report this package as skipped instead of processing it (repeatable).",
    )
    parser.add_argument(
        "--include-unpublished",
        action="store_true",
        help="Also process packages with publish = false.",
    )
    parser.add_argument(
        "--doc-base-url",
        help="Documentation host for packages without a documentation URL (default: https://docs.rs/).",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first package that fails.",
    )
    parser.add_argument(
        "-l",
        "--log",
        help="Path to a structured log file (optional).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("check", help="Report READMEs that are missing or out of date.")
    generate_parser = subparsers.add_parser("generate", help="Write READMEs from doc comments.")
    generate_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in GenerateMode],
        default=GenerateMode.OVERWRITE.value,
        help="What to do with an existing README (default: overwrite).",
    )
    return parser
