"""Literal constants used by readmesync."""

MANIFEST_FILENAME = "Cargo.toml"
README_FILENAME = "README.md"
DEFAULT_TEMPLATE_NAME = "README.tpl"

# Library docs win over binary docs.
ENTRYPOINT_CANDIDATES = (
    "src/lib.rs",
    "src/main.rs",
)

DEFAULT_DOC_BASE_URL = "https://docs.rs/"

SETTINGS_TABLE_NAME = "readmesync"

APPEND_SEPARATOR = "\n"

# Fenced-code info-string tokens that rustdoc treats as Rust code.
RUSTDOC_CODE_ATTRIBUTES = frozenset(
    {
        "rust",
        "ignore",
        "no_run",
        "should_panic",
        "compile_fail",
        "test_harness",
        "allow_fail",
        "edition2015",
        "edition2018",
        "edition2021",
        "edition2024",
    }
)
