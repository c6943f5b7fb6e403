"""Bootstrap-specific exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.

Strategies raise these; the orchestrator decides whether to try the next
link (non-fatal) or stop (fatal); the provider facade turns whatever reaches
it into a structured ErrorRecord for the host.
"""

from enum import StrEnum


class ErrorCategory(StrEnum):
    """Error categories reported to the host alongside each error record."""

    INVALID_OPERATION = "InvalidOperation"
    INVALID_DATA = "InvalidData"
    INVALID_ARGUMENT = "InvalidArgument"
    RESOURCE_UNAVAILABLE = "ResourceUnavailable"


class BootstrapError(Exception):
    """Base exception for bootstrap operations."""

    category: ErrorCategory = ErrorCategory.INVALID_OPERATION
    fatal: bool = False

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (file paths, names, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class UnresolvableReferenceError(BootstrapError):
    """A fast path or package reference did not resolve to a valid package."""

    category = ErrorCategory.INVALID_DATA


class MissingInstallationMediaError(BootstrapError):
    """The package has no installation-media links at all."""


class AttemptsExhaustedError(BootstrapError):
    """Every installation-media link was tried and none succeeded."""


class AmbiguousPackageReferenceError(BootstrapError):
    """A package reference resolved to more than one package."""

    category = ErrorCategory.INVALID_DATA


class AmbiguousModuleError(BootstrapError):
    """An archive's lib folder holds more than one native module."""

    category = ErrorCategory.INVALID_DATA


class DownloadError(BootstrapError):
    """Payload could not be downloaded or failed validation."""

    category = ErrorCategory.RESOURCE_UNAVAILABLE


class DestinationPathNotSetError(BootstrapError):
    """Destination root is missing. Configuration problem: no link can succeed."""

    fatal = True


class InvalidFilenameError(BootstrapError):
    """Link does not name a target file."""

    category = ErrorCategory.INVALID_ARGUMENT


class MissingVersionError(BootstrapError):
    """Package descriptor has no version to lay out under."""

    category = ErrorCategory.INVALID_DATA


class FileRemovalError(BootstrapError):
    """An existing target file could not be removed (probably in use)."""


class CopyError(BootstrapError):
    """Copy failed for a reason other than a file being in use."""


class ArchiveExtractionError(BootstrapError):
    """Archive could not be extracted."""

    category = ErrorCategory.INVALID_DATA


class NativeInstallerError(BootstrapError):
    """The native installer reported failure."""


class UnsupportedMediaTypeError(BootstrapError):
    """No strategy handles the link's media type."""

    category = ErrorCategory.INVALID_DATA


class NoUnitsInstalledError(BootstrapError):
    """A delegate package system finished without installing anything."""
