"""Keep Cargo workspace READMEs in sync with crate-level doc comments."""

__version__ = "0.1.0"
