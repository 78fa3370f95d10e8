"""README check and generate workflows, per package and per workspace."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .constants import APPEND_SEPARATOR, README_FILENAME
from .doc_links import resolve_doc_base_url, rewrite_doc_links
from .entrypoint import find_entrypoint
from .errors import PackageSyncError, ReadmeOutdatedError, ReadmeSyncError
from .fs_gateway import read_optional_bytes_file, read_text_file, write_bytes_file
from .logging_utils import log_event
from .manifest_gateway import set_readme_field
from .models import (
    CheckResult,
    GenerateMode,
    GenerateResult,
    Package,
    PackageOutcome,
    RenderFlags,
    Workspace,
)
from .renderer import DocRenderer, render_readme
from .templates import find_readme_template

# Check and generate must render identically to be comparable.
README_RENDER_FLAGS = RenderFlags(add_title=False, add_license=True, indent_headings=False)


def check_package_readme(
    *,
    workspace: Workspace,
    package: Package,
    renderer: DocRenderer = render_readme,
) -> CheckResult:
    entrypoint_abs = find_entrypoint(package.root_dir_abs)
    readme_abs = package.root_dir_abs / README_FILENAME

    existing_readme = read_optional_bytes_file(readme_abs)
    template_abs = None
    if existing_readme is None:
        result = CheckResult.MISSING
    else:
        candidate, template_abs = build_readme_candidate(
            workspace=workspace,
            package=package,
            entrypoint_abs=entrypoint_abs,
            renderer=renderer,
        )
        result = (
            CheckResult.UP_TO_DATE
            if _digest(existing_readme) == _digest(candidate.encode("utf-8"))
            else CheckResult.UPDATE_NEEDED
        )

    log_event(
        "readme_checked",
        package=package.name,
        result=result.name,
        readme_file=readme_abs,
        template_file=template_abs,
    )
    return result


def generate_package_readme(
    *,
    workspace: Workspace,
    package: Package,
    mode: GenerateMode,
    renderer: DocRenderer = render_readme,
) -> GenerateResult:
    entrypoint_abs = find_entrypoint(package.root_dir_abs)
    readme_abs = package.root_dir_abs / README_FILENAME
    readme_exists = readme_abs.is_file()

    if mode is GenerateMode.IF_MISSING and readme_exists:
        log_event("readme_kept", package=package.name, readme_file=readme_abs)
        _update_manifest(package)
        return GenerateResult.KEPT

    candidate, template_abs = build_readme_candidate(
        workspace=workspace,
        package=package,
        entrypoint_abs=entrypoint_abs,
        renderer=renderer,
    )

    candidate_bytes = candidate.encode("utf-8")
    if not readme_exists:
        final_readme = candidate_bytes
        result = GenerateResult.CREATED
    elif mode is GenerateMode.APPEND:
        # Prior bytes are kept as-is, whatever their encoding.
        prior_readme = read_optional_bytes_file(readme_abs) or b""
        final_readme = prior_readme + APPEND_SEPARATOR.encode("utf-8") + candidate_bytes
        result = GenerateResult.APPENDED
    else:
        final_readme = candidate_bytes
        result = GenerateResult.OVERWRITTEN

    write_bytes_file(readme_abs, final_readme)
    log_event(
        "readme_generated",
        package=package.name,
        result=result.name,
        mode=mode.value,
        readme_file=readme_abs,
        template_file=template_abs,
        byte_count=len(final_readme),
    )
    _update_manifest(package)
    return result


def build_readme_candidate(
    *,
    workspace: Workspace,
    package: Package,
    entrypoint_abs: Path,
    renderer: DocRenderer = render_readme,
) -> tuple[str, Path | None]:
    """Render and relink the README a package should have, plus the template used."""
    template_abs = find_readme_template(
        workspace_root_abs=workspace.root_dir_abs,
        package_dir_abs=package.root_dir_abs,
        template_name=workspace.settings.template_name,
    )
    entrypoint_text = read_text_file(entrypoint_abs)
    template_text = read_text_file(template_abs) if template_abs is not None else None

    rendered = renderer(
        entrypoint_text=entrypoint_text,
        template_text=template_text,
        package=package,
        flags=README_RENDER_FLAGS,
    )
    relinked = rewrite_doc_links(
        readme_text=rendered,
        package_name=package.name,
        doc_base_url=resolve_doc_base_url(package=package, settings=workspace.settings),
    )
    return relinked, template_abs


def ensure_readme_current(*, package_name: str, result: CheckResult) -> None:
    if result is CheckResult.MISSING:
        raise ReadmeOutdatedError(f"{package_name}: README is missing")
    if result is CheckResult.UPDATE_NEEDED:
        raise ReadmeOutdatedError(f"{package_name}: README needs an update")


def check_workspace_readmes(
    *,
    workspace: Workspace,
    packages: Iterable[Package],
    skip_names: frozenset[str] = frozenset(),
    fail_fast: bool = False,
    renderer: DocRenderer = render_readme,
    on_outcome: Callable[[PackageOutcome], None] | None = None,
) -> list[PackageOutcome]:
    return _run_packages(
        packages=packages,
        skip_names=skip_names,
        skipped_result=CheckResult.SKIPPED,
        fail_fast=fail_fast,
        on_outcome=on_outcome,
        process=lambda package: check_package_readme(
            workspace=workspace, package=package, renderer=renderer
        ),
    )


def generate_workspace_readmes(
    *,
    workspace: Workspace,
    packages: Iterable[Package],
    mode: GenerateMode,
    skip_names: frozenset[str] = frozenset(),
    fail_fast: bool = False,
    renderer: DocRenderer = render_readme,
    on_outcome: Callable[[PackageOutcome], None] | None = None,
) -> list[PackageOutcome]:
    return _run_packages(
        packages=packages,
        skip_names=skip_names,
        skipped_result=GenerateResult.SKIPPED,
        fail_fast=fail_fast,
        on_outcome=on_outcome,
        process=lambda package: generate_package_readme(
            workspace=workspace, package=package, mode=mode, renderer=renderer
        ),
    )


def _run_packages(
    *,
    packages: Iterable[Package],
    skip_names: frozenset[str],
    skipped_result: CheckResult | GenerateResult,
    fail_fast: bool,
    on_outcome: Callable[[PackageOutcome], None] | None,
    process: Callable[[Package], CheckResult | GenerateResult],
) -> list[PackageOutcome]:
    outcomes: list[PackageOutcome] = []
    for package in packages:
        if package.name in skip_names:
            outcome = PackageOutcome(package_name=package.name, result=skipped_result)
        else:
            try:
                outcome = PackageOutcome(package_name=package.name, result=process(package))
            except ReadmeSyncError as exc:
                error = PackageSyncError(package.name, exc)
                error.__cause__ = exc
                log_event(
                    "package_failed",
                    level=logging.ERROR,
                    package=package.name,
                    error_type=type(exc).__name__,
                    error=str(exc),
                )
                outcome = PackageOutcome(package_name=package.name, error=error)

        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
        if outcome.failed and fail_fast:
            break
    return outcomes


def _update_manifest(package: Package) -> None:
    changed = set_readme_field(package.manifest_path_abs)
    log_event(
        "manifest_updated",
        package=package.name,
        manifest_file=package.manifest_path_abs,
        changed=changed,
    )


def _digest(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()
