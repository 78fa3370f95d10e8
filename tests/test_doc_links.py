from __future__ import annotations

from pathlib import Path

import pytest

from readmesync.doc_links import resolve_doc_base_url, rewrite_doc_links
from readmesync.models import SyncSettings

from conftest import make_package

DOCS_RS = "https://docs.rs/"


def _rewrite(text: str, package_name: str = "my-crate", base: str = DOCS_RS) -> str:
    return rewrite_doc_links(readme_text=text, package_name=package_name, doc_base_url=base)


def test_sibling_crate_link_becomes_docs_host_url() -> None:
    assert _rewrite("[Foo](../bar_baz/index.html)") == "[Foo](https://docs.rs/bar-baz)"


def test_own_crate_link_keeps_title() -> None:
    assert (
        _rewrite('[Foo](./quux.html "See also")')
        == '[Foo](https://docs.rs/my-crate/latest/my_crate/quux.html "See also")'
    )


def test_own_crate_link_without_title() -> None:
    assert (
        _rewrite("see [the trait](./trait.Render.html#method.render_all).")
        == "see [the trait](https://docs.rs/my-crate/latest/my_crate/trait.Render.html#method.render_all)."
    )


def test_sibling_link_keeps_title_with_spaces() -> None:
    assert (
        _rewrite('[Json](../serde_json/struct.Value.html "the value type")')
        == '[Json](https://docs.rs/serde-json/struct.Value.html "the value type")'
    )


@pytest.mark.parametrize(
    "text",
    [
        "[Home](https://example.com/a_b/index.html)",
        '[Home](https://example.com "Title with spaces")',
        "[Anchor](#usage)",
        "[Relative](docs/guide.md)",
        '[Up](..\\windows "t")',
        "![logo](./logo.png)",
    ],
)
def test_links_that_are_not_relative_doc_links_are_unchanged(text: str) -> None:
    assert _rewrite(text) == text


def test_multiple_links_on_one_line_are_rewritten_independently() -> None:
    text = "[A](./a.html) and [B](https://b.example) and [C](../c_d/index.html)"

    assert _rewrite(text) == (
        "[A](https://docs.rs/my-crate/latest/my_crate/a.html) and "
        "[B](https://b.example) and "
        "[C](https://docs.rs/c-d)"
    )


def test_link_text_with_parentheses_and_punctuation_is_preserved() -> None:
    assert (
        _rewrite("[`Vec<T>` (growable), see: docs!](./struct.Vec.html)")
        == "[`Vec<T>` (growable), see: docs!](https://docs.rs/my-crate/latest/my_crate/struct.Vec.html)"
    )


def test_rewriting_is_idempotent() -> None:
    text = '[A](./a.html "t") [B](../b_c/index.html) [C](https://c.example)'

    once = _rewrite(text)

    assert _rewrite(once) == once


def test_custom_base_url_is_used_as_prefix() -> None:
    assert (
        _rewrite("[A](./a.html)", base="https://docs.example.com/")
        == "[A](https://docs.example.com/my-crate/latest/my_crate/a.html)"
    )


def test_resolve_doc_base_url_prefers_package_documentation(tmp_path: Path) -> None:
    package = make_package(tmp_path, documentation_url="https://internal.example/docs")

    assert (
        resolve_doc_base_url(package=package, settings=SyncSettings())
        == "https://internal.example/docs/"
    )


def test_resolve_doc_base_url_falls_back_to_settings(tmp_path: Path) -> None:
    package = make_package(tmp_path)

    assert resolve_doc_base_url(package=package, settings=SyncSettings()) == DOCS_RS
    assert (
        resolve_doc_base_url(
            package=package,
            settings=SyncSettings(default_doc_base_url="https://docs.example.com"),
        )
        == "https://docs.example.com/"
    )
