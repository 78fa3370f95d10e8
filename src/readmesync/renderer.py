"""Render a README body from crate-level doc comments.

This is the default doc renderer. It extracts the leading `//!` lines and
`/*! ... */` blocks of an entrypoint, converts rustdoc code fences into plain
Markdown, and either frames the result in a template or emits it bare.
"""

from __future__ import annotations

import re
import textwrap
from typing import Protocol

from .constants import RUSTDOC_CODE_ATTRIBUTES
from .errors import RenderError
from .models import Package, RenderFlags

_FENCE_RE = re.compile(r"^(?P<indent>\s*)(?P<fence>```+|~~~+)(?P<info>.*)$")
_BLOCK_GUTTER_RE = re.compile(r"^(?P<indent>[ \t]*)\*(?: |$)")

_README_PLACEHOLDER = "{{readme}}"
_CRATE_PLACEHOLDER = "{{crate}}"
_VERSION_PLACEHOLDER = "{{version}}"
_LICENSE_PLACEHOLDER = "{{license}}"


class DocRenderer(Protocol):
    def __call__(
        self,
        *,
        entrypoint_text: str,
        template_text: str | None,
        package: Package,
        flags: RenderFlags,
    ) -> str: ...


def render_readme(
    *,
    entrypoint_text: str,
    template_text: str | None,
    package: Package,
    flags: RenderFlags,
) -> str:
    doc_lines = extract_crate_docs(entrypoint_text)
    readme_body = "\n".join(
        convert_doc_markdown(doc_lines, indent_headings=flags.indent_headings)
    ).strip("\n")

    if template_text is None:
        rendered = _render_bare(readme_body=readme_body, package=package, flags=flags)
    else:
        rendered = _render_template(
            template_text=template_text, readme_body=readme_body, package=package
        )
    return rendered.rstrip("\n") + "\n"


def extract_crate_docs(source_text: str) -> list[str]:
    """Return the crate-level doc comment lines at the top of a Rust source file."""
    doc_lines: list[str] = []
    lines = source_text.splitlines()
    index = 0
    in_docs = False

    while index < len(lines):
        stripped = lines[index].strip()

        if stripped.startswith("//!"):
            doc_lines.append(_strip_line_doc_marker(stripped))
            in_docs = True
            index += 1
            continue

        if stripped.startswith("/*!"):
            block_lines, index = _read_block_doc(lines, index)
            doc_lines.extend(block_lines)
            in_docs = True
            continue

        if in_docs:
            break

        if stripped == "" or _is_plain_comment(stripped):
            index += 1
            continue

        if stripped.startswith("#!["):
            index = _skip_inner_attribute(lines, index)
            continue

        if _is_plain_block_comment(stripped):
            index = _skip_block_comment(lines, index)
            continue

        break

    return doc_lines


def convert_doc_markdown(doc_lines: list[str], *, indent_headings: bool) -> list[str]:
    """Turn rustdoc Markdown into README Markdown."""
    output: list[str] = []
    open_fence: str | None = None
    in_rust_block = False

    for line in doc_lines:
        fence_match = _FENCE_RE.match(line)

        if open_fence is None:
            if fence_match is not None:
                open_fence = fence_match.group("fence")
                info = fence_match.group("info").strip()
                in_rust_block = _is_rust_info_string(info)
                if in_rust_block:
                    output.append(f"{fence_match.group('indent')}{open_fence}rust")
                else:
                    output.append(line)
                continue
            if indent_headings and line.startswith("#"):
                output.append(f"#{line}")
            else:
                output.append(line)
            continue

        if (
            fence_match is not None
            and fence_match.group("info").strip() == ""
            and fence_match.group("fence").startswith(open_fence)
        ):
            output.append(f"{fence_match.group('indent')}{open_fence}")
            open_fence = None
            in_rust_block = False
            continue

        if in_rust_block:
            code_line = _process_rust_code_line(line)
            if code_line is not None:
                output.append(code_line)
        else:
            output.append(line)

    if open_fence is not None:
        raise RenderError("Unterminated code block in crate documentation")

    return output


def _render_bare(*, readme_body: str, package: Package, flags: RenderFlags) -> str:
    sections: list[str] = []
    if flags.add_title:
        sections.append(f"# {package.name}")
    if readme_body:
        sections.append(readme_body)
    if flags.add_license and package.license:
        sections.append(f"License: {package.license}")
    return "\n\n".join(sections)


def _render_template(*, template_text: str, readme_body: str, package: Package) -> str:
    if _README_PLACEHOLDER not in template_text:
        raise RenderError(f"Template is missing the {_README_PLACEHOLDER} placeholder")
    if _LICENSE_PLACEHOLDER in template_text and not package.license:
        raise RenderError(
            f"Template uses {_LICENSE_PLACEHOLDER} but {package.name} declares no license"
        )

    rendered = template_text.replace(_CRATE_PLACEHOLDER, package.name)
    rendered = rendered.replace(_VERSION_PLACEHOLDER, package.version)
    rendered = rendered.replace(_LICENSE_PLACEHOLDER, package.license or "")
    # Substituted last so doc text containing placeholders is kept literally.
    return rendered.replace(_README_PLACEHOLDER, readme_body)


def _strip_line_doc_marker(stripped_line: str) -> str:
    text = stripped_line[3:]
    if text.startswith(" "):
        text = text[1:]
    return text


def _is_plain_comment(stripped_line: str) -> bool:
    return stripped_line.startswith("//") and not stripped_line.startswith("///")


def _is_plain_block_comment(stripped_line: str) -> bool:
    if not stripped_line.startswith("/*"):
        return False
    # `/**` opens an outer doc comment, `/***` and `/**/` do not.
    return not stripped_line.startswith("/**") or stripped_line.startswith(("/***", "/**/"))


def _skip_inner_attribute(lines: list[str], start: int) -> int:
    """Return the index after a `#![...]` attribute, which may span lines."""
    depth = 0
    index = start
    while index < len(lines):
        depth += lines[index].count("[") - lines[index].count("]")
        index += 1
        if depth <= 0:
            return index
    raise RenderError("Unterminated #![...] attribute before crate documentation")


def _skip_block_comment(lines: list[str], start: int) -> int:
    """Return the index after an ordinary `/* ... */` comment; these nest in Rust."""
    depth = 0
    index = start
    while index < len(lines):
        line = lines[index]
        depth += line.count("/*") - line.count("*/")
        index += 1
        if depth <= 0:
            return index
    raise RenderError("Unterminated /* comment block before crate documentation")


def _read_block_doc(lines: list[str], start: int) -> tuple[list[str], int]:
    first = lines[start].strip()[3:]
    collected: list[str] = []
    index = start

    if "*/" in first:
        return [first[: first.index("*/")].strip()], start + 1

    collected.append(first)
    index += 1
    while index < len(lines):
        line = lines[index]
        if "*/" in line:
            collected.append(line[: line.index("*/")])
            return _normalize_block_lines(collected), index + 1
        collected.append(line)
        index += 1

    raise RenderError("Unterminated /*! doc comment block")


def _normalize_block_lines(raw_lines: list[str]) -> list[str]:
    if raw_lines and raw_lines[0].strip() == "":
        raw_lines = raw_lines[1:]
    if raw_lines and raw_lines[-1].strip() == "":
        raw_lines = raw_lines[:-1]

    if _has_star_gutter(raw_lines):
        return [
            _BLOCK_GUTTER_RE.sub("", line, count=1) if line.strip() else ""
            for line in raw_lines
        ]

    return textwrap.dedent("\n".join(raw_lines)).split("\n")


def _has_star_gutter(raw_lines: list[str]) -> bool:
    """A gutter is one ` * ` column on every line, not a run of Markdown bullets.

    The column must sit under the `*` of `/*!`, or some line must be a lone
    `*` continuation, otherwise the stars are taken as list markers.
    """
    columns: set[int] = set()
    has_lone_star = False
    for line in raw_lines:
        if line.strip() == "":
            continue
        match = _BLOCK_GUTTER_RE.match(line)
        if match is None:
            return False
        columns.add(len(match.group("indent")))
        has_lone_star = has_lone_star or line.strip() == "*"

    if len(columns) != 1:
        return False
    return columns.pop() == 1 or has_lone_star


def _is_rust_info_string(info: str) -> bool:
    if info == "":
        return True
    tokens = [token.strip() for token in info.split(",") if token.strip()]
    return all(token in RUSTDOC_CODE_ATTRIBUTES for token in tokens)


def _process_rust_code_line(line: str) -> str | None:
    stripped = line.lstrip()
    indent = line[: len(line) - len(stripped)]
    if stripped.startswith("##"):
        return f"{indent}{stripped[1:]}"
    if stripped == "#" or stripped.startswith("# "):
        return None
    return line
