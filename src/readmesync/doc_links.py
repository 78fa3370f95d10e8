"""Rewrite relative rustdoc links into absolute documentation-host URLs."""

from __future__ import annotations

import re

from .models import Package, SyncSettings

# [text](url) or [text](url "title"); images (![alt](...)) are not links here.
_INLINE_LINK_RE = re.compile(
    r'(?<!!)\[(?P<text>[^\[\]]+)\]\((?P<url>[^\s()]+)(?P<title>\s+"[^"]*")?\)'
)

_SIBLING_PREFIX = "../"
_OWN_CRATE_PREFIX = "./"
_INDEX_SUFFIX = "/index.html"


def resolve_doc_base_url(*, package: Package, settings: SyncSettings) -> str:
    base_url = package.documentation_url or settings.default_doc_base_url
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url


def rewrite_doc_links(*, readme_text: str, package_name: str, doc_base_url: str) -> str:
    """Rewrite `../` and `./` link targets; every other link is left untouched."""

    def _replace(match: re.Match[str]) -> str:
        url = match.group("url")
        if url.startswith(_SIBLING_PREFIX):
            new_url = doc_base_url + _sibling_crate_path(url[len(_SIBLING_PREFIX):])
        elif url.startswith(_OWN_CRATE_PREFIX):
            new_url = doc_base_url + _own_crate_path(
                package_name, url[len(_OWN_CRATE_PREFIX):]
            )
        else:
            return match.group(0)

        title = match.group("title") or ""
        return f"[{match.group('text')}]({new_url}{title})"

    return _INLINE_LINK_RE.sub(_replace, readme_text)


def _sibling_crate_path(rest: str) -> str:
    path = rest.replace("_", "-")
    if path.endswith(_INDEX_SUFFIX):
        path = path[: -len(_INDEX_SUFFIX)]
    return path


def _own_crate_path(package_name: str, rest: str) -> str:
    crate_ident = package_name.replace("-", "_")
    return f"{package_name}/latest/{crate_ident}/{rest}"
