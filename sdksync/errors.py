"""Error types raised by sdksync."""


class SdkSyncError(Exception):
    """Base class for sdksync errors."""


class ManifestError(SdkSyncError):
    """A pubspec.yaml could not be read or updated."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ManifestReadError(ManifestError):
    """The manifest could not be read, parsed, or has no usable SDK constraint."""


class ManifestWriteError(ManifestError):
    """The manifest could not be loaded for update or written back."""


class InvalidSectionError(ManifestWriteError):
    """The addressed top-level section is missing or not a mapping."""

    def __init__(self, section: str, path: str | None = None):
        super().__init__(
            f"Dependency type '{section}' not found or not an object in pubspec.yaml",
            path,
        )
        self.section = section


class ToolchainQueryError(SdkSyncError):
    """The toolchain's machine-readable version could not be obtained."""


class CommitError(SdkSyncError):
    """Pushing the updated manifest to the repository failed."""


class OrchestrationError(SdkSyncError):
    """The synchronization run reached a state it cannot continue from."""


# Errors that end the process with status 1 instead of being reported.
FATAL_ERRORS = (ManifestError, ToolchainQueryError)
