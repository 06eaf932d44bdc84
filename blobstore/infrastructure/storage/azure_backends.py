"""Azure Blob backends selected at startup.

AzureServiceBackend is built from a connection string: it holds a shared-key
credential, so it can sign read-only SAS URLs and submit batch deletes.
AzureContainerUrlBackend is built from a container URL that already carries
a SAS token: it hands out blob URLs as-is and has no batch delete.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING, BinaryIO

from azure.core.exceptions import AzureError
from azure.storage.blob import BlobSasPermissions, generate_blob_sas
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

from blobstore.infrastructure.exceptions import (
    StorageDeleteError,
    StorageNotSupportedError,
)
from blobstore.infrastructure.storage.azure_container import AzureContainerOperations
from blobstore.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from blobstore.core.config import Settings

logger = logging.getLogger(__name__)


class AzureServiceBackend:
    """Shared-key backend: SAS signing and batch delete."""

    name = "azure_service"
    supports_batch_delete = True

    def __init__(
        self,
        service_client: BlobServiceClient,
        container_name: str,
        max_concurrency: int = 20,
        url_expiry: timedelta = timedelta(days=1),
        clock_skew: timedelta = timedelta(minutes=5),
    ) -> None:
        """Initialize from a service client.

        Args:
            service_client: Async BlobServiceClient with a shared-key credential.
            container_name: Container holding all blobs.
            max_concurrency: Parallel block uploads for streamed uploads.
            url_expiry: Lifetime of signed download URLs.
            clock_skew: How far signed URL start time is backdated.
        """
        self._service_client = service_client
        self._ops = AzureContainerOperations(
            service_client.get_container_client(container_name),
            max_concurrency=max_concurrency,
        )
        self.url_expiry = url_expiry
        self.clock_skew = clock_skew

    @classmethod
    def from_connection_string(
        cls, connection_string: str, container_name: str, settings: Settings
    ) -> "AzureServiceBackend":
        service_client = BlobServiceClient.from_connection_string(
            connection_string,
            max_block_size=settings.upload_block_size,
        )
        return cls(
            service_client,
            container_name,
            max_concurrency=settings.upload_max_concurrency,
            url_expiry=timedelta(hours=settings.download_url_expiry_hours),
            clock_skew=timedelta(minutes=settings.download_url_clock_skew_minutes),
        )

    async def upload(self, blob_name: str, content: bytes, content_type: str) -> None:
        await self._ops.upload(blob_name, content, content_type)

    async def upload_stream(
        self,
        blob_name: str,
        chunks: AsyncIterable[bytes] | BinaryIO,
        content_type: str,
    ) -> None:
        await self._ops.upload_stream(blob_name, chunks, content_type)

    async def download(self, blob_name: str) -> bytes:
        return await self._ops.download(blob_name)

    def download_stream(self, blob_name: str) -> AsyncIterator[bytes]:
        return self._ops.download_stream(blob_name)

    async def list_names(self, prefix: str | None = None) -> list[str]:
        return await self._ops.list_names(prefix)

    async def delete(self, blob_name: str) -> None:
        await self._ops.delete(blob_name)

    async def delete_batch(self, blob_names: Sequence[str]) -> int:
        """Submit one batch delete; count sub-responses that did not succeed."""
        if not blob_names:
            return 0
        container_client = self._ops.container_client
        try:
            responses = await container_client.delete_blobs(
                *blob_names, raise_on_any_failure=False
            )
            failed = 0
            async for response in responses:
                if response.status_code >= 300:
                    failed += 1
        except AzureError as e:
            raise StorageDeleteError(
                f"{blob_names[0]} (+{len(blob_names) - 1} more)", str(e)
            ) from e
        logger.debug(
            "Batch delete submitted: %s blobs, %s failed", len(blob_names), failed
        )
        return failed

    async def get_download_url(self, blob_name: str) -> str:
        """Return a read-only SAS URL; the blob is not checked for existence."""
        blob_client = self._ops.container_client.get_blob_client(blob_name)
        account_key = getattr(self._service_client.credential, "account_key", None)
        if not account_key:
            return blob_client.url
        now = utc_now()
        sas_token = generate_blob_sas(
            account_name=blob_client.account_name,
            container_name=blob_client.container_name,
            blob_name=blob_client.blob_name,
            account_key=account_key,
            permission=BlobSasPermissions(read=True),
            start=now - self.clock_skew,
            expiry=now + self.url_expiry,
        )
        return f"{blob_client.url}?{sas_token}"

    def get_blob_url(self, blob_name: str) -> str:
        return self._ops.get_blob_url(blob_name)

    async def create_container(self) -> bool:
        return await self._ops.create_container()

    async def delete_container(self) -> bool:
        return await self._ops.delete_container()

    async def close(self) -> None:
        await self._ops.close()
        await self._service_client.close()


class AzureContainerUrlBackend:
    """SAS container URL backend: no signing, no batch delete."""

    name = "azure_container_url"
    supports_batch_delete = False

    def __init__(self, container_client: ContainerClient, max_concurrency: int = 20) -> None:
        self._ops = AzureContainerOperations(
            container_client, max_concurrency=max_concurrency
        )

    @classmethod
    def from_container_url(
        cls, container_url: str, settings: Settings
    ) -> "AzureContainerUrlBackend":
        container_client = ContainerClient.from_container_url(
            container_url,
            max_block_size=settings.upload_block_size,
        )
        return cls(container_client, max_concurrency=settings.upload_max_concurrency)

    async def upload(self, blob_name: str, content: bytes, content_type: str) -> None:
        await self._ops.upload(blob_name, content, content_type)

    async def upload_stream(
        self,
        blob_name: str,
        chunks: AsyncIterable[bytes] | BinaryIO,
        content_type: str,
    ) -> None:
        await self._ops.upload_stream(blob_name, chunks, content_type)

    async def download(self, blob_name: str) -> bytes:
        return await self._ops.download(blob_name)

    def download_stream(self, blob_name: str) -> AsyncIterator[bytes]:
        return self._ops.download_stream(blob_name)

    async def list_names(self, prefix: str | None = None) -> list[str]:
        return await self._ops.list_names(prefix)

    async def delete(self, blob_name: str) -> None:
        await self._ops.delete(blob_name)

    async def delete_batch(self, blob_names: Sequence[str]) -> int:
        raise StorageNotSupportedError("delete_batch", self.name)

    async def get_download_url(self, blob_name: str) -> str:
        """Return the blob URL, carrying the container's SAS token."""
        return self._ops.container_client.get_blob_client(blob_name).url

    def get_blob_url(self, blob_name: str) -> str:
        return self._ops.get_blob_url(blob_name)

    async def create_container(self) -> bool:
        return await self._ops.create_container()

    async def delete_container(self) -> bool:
        return await self._ops.delete_container()

    async def close(self) -> None:
        await self._ops.close()
