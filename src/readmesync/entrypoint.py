"""Documentation entrypoint lookup."""

from __future__ import annotations

from pathlib import Path

from .constants import ENTRYPOINT_CANDIDATES
from .errors import EntrypointNotFoundError


def find_entrypoint(package_dir_abs: Path) -> Path:
    """Return the source file whose crate docs seed the README.

    Tried in order: src/lib.rs, then src/main.rs.
    """
    for candidate_rel in ENTRYPOINT_CANDIDATES:
        candidate_abs = package_dir_abs / candidate_rel
        if candidate_abs.is_file():
            return candidate_abs

    tried = ", ".join(ENTRYPOINT_CANDIDATES)
    raise EntrypointNotFoundError(f"No entrypoint found in {package_dir_abs} (tried {tried})")
