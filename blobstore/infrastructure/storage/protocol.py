"""Storage protocols (DIP).

BlobBackendProtocol is the capability interface the facade delegates to;
implementations: AzureServiceBackend, AzureContainerUrlBackend.
BlobStorageProtocol is the contract the host framework consumes.
"""

from collections.abc import AsyncIterable, AsyncIterator, Sequence
from typing import BinaryIO, Protocol

from blobstore.domain.value_objects import BatchOutcome


class BlobBackendProtocol(Protocol):
    """Protocol for object storage backends. Names are canonical storage keys."""

    name: str
    supports_batch_delete: bool

    async def upload(self, blob_name: str, content: bytes, content_type: str) -> None:
        """Upload content, replacing any existing blob."""
        ...

    async def upload_stream(
        self,
        blob_name: str,
        chunks: AsyncIterable[bytes] | BinaryIO,
        content_type: str,
    ) -> None:
        """Upload streamed content in blocks."""
        ...

    async def download(self, blob_name: str) -> bytes:
        """Return full content. Raises StorageNotFoundError if missing."""
        ...

    def download_stream(self, blob_name: str) -> AsyncIterator[bytes]:
        """Stream content in chunks."""
        ...

    async def list_names(self, prefix: str | None = None) -> list[str]:
        """Return names of all blobs starting with prefix."""
        ...

    async def delete(self, blob_name: str) -> None:
        """Delete blob. Raises StorageNotFoundError if missing."""
        ...

    async def delete_batch(self, blob_names: Sequence[str]) -> int:
        """Delete blobs in one batch request. Returns the number of failed items."""
        ...

    async def get_download_url(self, blob_name: str) -> str:
        """Return a URL the blob can be read from."""
        ...

    def get_blob_url(self, blob_name: str) -> str:
        """Return the blob URL without any query string."""
        ...

    async def create_container(self) -> bool:
        """Create container if missing. Returns True if created."""
        ...

    async def delete_container(self) -> bool:
        """Delete container if present. Returns True if deleted."""
        ...

    async def close(self) -> None:
        """Release SDK clients."""
        ...


class BlobStorageProtocol(Protocol):
    """Blob storage contract exposed to the content-management host."""

    async def upload_blob(
        self, blob_key: str, content: bytes, content_type: str | None = None
    ) -> None:
        ...

    async def download_blob(self, blob_key: str) -> bytes | None:
        ...

    async def list_blobs(self, blob_prefix: str | None = None) -> list[str]:
        ...

    async def get_download_url(self, blob_key: str) -> str | None:
        ...

    async def delete_blob(self, blob_key: str) -> None:
        ...

    async def delete_blob_folder(self, blob_prefix: str) -> BatchOutcome:
        ...

    async def create_container(self) -> None:
        ...

    async def delete_container(self) -> None:
        ...
