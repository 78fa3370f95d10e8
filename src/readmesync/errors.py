"""Typed exceptions for readmesync."""


class ReadmeSyncError(Exception):
    """Base exception for readmesync failures."""


class ConfigError(ValueError, ReadmeSyncError):
    """Raised when settings or package selection are invalid."""


class WorkspaceError(ReadmeSyncError):
    """Raised when the workspace or a member manifest cannot be loaded."""


class EntrypointNotFoundError(ReadmeSyncError):
    """Raised when a package has neither src/lib.rs nor src/main.rs."""


class RenderError(ReadmeSyncError):
    """Raised when doc comments or the template cannot be rendered."""


class ReadmeIoError(ReadmeSyncError):
    """Raised when a README, template or entrypoint cannot be read or written."""


class ManifestUpdateError(ReadmeSyncError):
    """Raised when the manifest readme field cannot be updated."""


class ReadmeOutdatedError(ReadmeSyncError):
    """Raised when a README is missing or differs from the generated one."""


class PackageSyncError(ReadmeSyncError):
    """Wraps a failure with the name of the package being processed."""

    def __init__(self, package_name: str, cause: ReadmeSyncError) -> None:
        super().__init__(f"Failure processing README for {package_name}: {cause}")
        self.package_name = package_name
        self.cause = cause
