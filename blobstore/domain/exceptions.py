"""Domain exceptions for the blobstore adapter.

Defines the error taxonomy shared by the storage facade and its backends.
These exceptions carry no SDK types; infrastructure translates Azure errors
into them before they reach callers.
"""

from typing import Any


class BlobStoreException(Exception):
    """Base exception for all blobstore errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. blob_key, setting).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(BlobStoreException):
    """Raised when a required setting is absent or a configured value is invalid."""

    def __init__(self, message: str, setting: str | None = None) -> None:
        """Initialize with message and optional setting name.

        Args:
            message: Description of the configuration problem.
            setting: Optional name of the offending setting.
        """
        details = {"setting": setting} if setting else {}
        super().__init__(message, "CONFIGURATION_ERROR", details)
