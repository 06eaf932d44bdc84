"""Infrastructure exceptions for storage operations.

Storage errors extend BlobStoreException so hosts can map them to their own
responses consistently. Backends raise these from the originating SDK error.
"""

from blobstore.domain.exceptions import BlobStoreException


class StorageException(BlobStoreException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """Blob or container not found in storage."""

    def __init__(self, blob_key: str) -> None:
        super().__init__(
            f"Blob not found: {blob_key}",
            "STORAGE_NOT_FOUND",
            {"blob_key": blob_key},
        )


class StorageTransportError(StorageException):
    """Backend call failed for a reason other than a missing object."""

    operation = "access"

    def __init__(self, blob_key: str, reason: str) -> None:
        super().__init__(
            f"Unable to {self.operation} blob {blob_key}. {reason}",
            f"STORAGE_{self.operation.upper()}_ERROR",
            {"blob_key": blob_key, "reason": reason},
        )


class StorageUploadError(StorageTransportError):
    """Blob upload failed."""

    operation = "upload"


class StorageDownloadError(StorageTransportError):
    """Blob download failed."""

    operation = "download"


class StorageDeleteError(StorageTransportError):
    """Blob deletion failed."""

    operation = "delete"


class StorageContainerError(StorageTransportError):
    """Container create/delete or listing failed."""

    operation = "manage"


class StorageNotSupportedError(StorageException):
    """Operation not supported by this storage backend."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(
            f"Operation '{operation}' not supported by {backend} backend",
            "STORAGE_NOT_SUPPORTED",
            {"operation": operation, "backend": backend},
        )
