"""Container-scoped Azure Blob operations shared by both backends.

Wraps an async ContainerClient (azure.storage.blob.aio) and translates SDK
errors into storage exceptions carrying the failing blob name.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import BinaryIO

from azure.core.exceptions import (
    AzureError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import ContainerClient

from blobstore.infrastructure.exceptions import (
    StorageContainerError,
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageUploadError,
)

logger = logging.getLogger(__name__)


def is_not_found(error: Exception) -> bool:
    """Return True if the SDK error means the blob or container is missing."""
    return isinstance(error, ResourceNotFoundError) or (
        getattr(error, "status_code", None) == 404
    )


def strip_query(url: str) -> str:
    """Drop the query string (SAS token) from a URL."""
    return url.split("?", 1)[0]


class AzureContainerOperations:
    """Upload, download, list, delete, and container lifecycle on one container."""

    def __init__(
        self,
        container_client: ContainerClient,
        max_concurrency: int = 20,
    ) -> None:
        """Initialize with an async container client.

        Args:
            container_client: Client for the target container.
            max_concurrency: Parallel block uploads for streamed uploads.
        """
        self.container_client = container_client
        self.max_concurrency = max_concurrency

    @property
    def container_name(self) -> str:
        return self.container_client.container_name

    def get_blob_url(self, blob_name: str) -> str:
        return strip_query(self.container_client.get_blob_client(blob_name).url)

    async def upload(self, blob_name: str, content: bytes, content_type: str) -> None:
        blob_client = self.container_client.get_blob_client(blob_name)
        try:
            await blob_client.upload_blob(
                content,
                length=len(content),
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except Exception as e:
            raise StorageUploadError(blob_name, str(e)) from e
        logger.debug("Uploaded blob %s (%s bytes)", blob_name, len(content))

    async def upload_stream(
        self,
        blob_name: str,
        chunks: AsyncIterable[bytes] | BinaryIO,
        content_type: str,
    ) -> None:
        blob_client = self.container_client.get_blob_client(blob_name)
        try:
            await blob_client.upload_blob(
                chunks,
                overwrite=True,
                max_concurrency=self.max_concurrency,
                content_settings=ContentSettings(content_type=content_type),
            )
        except Exception as e:
            raise StorageUploadError(blob_name, str(e)) from e
        logger.debug("Uploaded blob stream %s", blob_name)

    async def download(self, blob_name: str) -> bytes:
        blob_client = self.container_client.get_blob_client(blob_name)
        try:
            downloader = await blob_client.download_blob()
            return await downloader.readall()
        except AzureError as e:
            if is_not_found(e):
                raise StorageNotFoundError(blob_name) from e
            raise StorageDownloadError(blob_name, str(e)) from e

    async def download_stream(self, blob_name: str) -> AsyncIterator[bytes]:
        blob_client = self.container_client.get_blob_client(blob_name)
        try:
            downloader = await blob_client.download_blob()
            async for chunk in downloader.chunks():
                yield chunk
        except AzureError as e:
            if is_not_found(e):
                raise StorageNotFoundError(blob_name) from e
            raise StorageDownloadError(blob_name, str(e)) from e

    async def list_names(self, prefix: str | None = None) -> list[str]:
        try:
            return [
                blob.name
                async for blob in self.container_client.list_blobs(
                    name_starts_with=prefix or None
                )
            ]
        except AzureError as e:
            raise StorageContainerError(prefix or self.container_name, str(e)) from e

    async def delete(self, blob_name: str) -> None:
        blob_client = self.container_client.get_blob_client(blob_name)
        try:
            await blob_client.delete_blob()
        except AzureError as e:
            if is_not_found(e):
                raise StorageNotFoundError(blob_name) from e
            raise StorageDeleteError(blob_name, str(e)) from e

    async def create_container(self) -> bool:
        try:
            await self.container_client.create_container()
        except ResourceExistsError:
            return False
        except AzureError as e:
            raise StorageContainerError(self.container_name, str(e)) from e
        logger.info("Created blob container %s", self.container_name)
        return True

    async def delete_container(self) -> bool:
        try:
            await self.container_client.delete_container()
        except AzureError as e:
            if is_not_found(e):
                return False
            raise StorageContainerError(self.container_name, str(e)) from e
        logger.info("Deleted blob container %s", self.container_name)
        return True

    async def close(self) -> None:
        await self.container_client.close()
