"""Blob storage facade: the contract the content-management host consumes.

Keys are resolved against the configured base path, then each call is
delegated to the backend selected at first use. The backend is created at
most once; concurrent first callers await the same in-flight initialization.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import aiofiles
import aiofiles.os

from blobstore.core.config import get_settings
from blobstore.core.constants import SETTING_BASE_PATH, TELEMETRY_EVENT_NAME
from blobstore.domain.value_objects import BatchOutcome
from blobstore.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StorageNotSupportedError,
    StorageTransportError,
    StorageUploadError,
)
from blobstore.infrastructure.storage.batching import BulkDeleteBatcher
from blobstore.infrastructure.storage.factory import BlobBackendFactory
from blobstore.infrastructure.storage.key_resolver import (
    is_under_base_path,
    list_prefix,
    normalize_path,
    resolve_key,
    strip_base_path,
)
from blobstore.infrastructure.storage.protocol import BlobBackendProtocol
from blobstore.shared.telemetry.events import LoggingTelemetry, TelemetryProtocol
from blobstore.shared.telemetry.tracing import traced
from blobstore.shared.utils.content_type import guess_content_type

if TYPE_CHECKING:
    from blobstore.core.config import Settings
    from blobstore.core.settings_provider import SettingsProvider

logger = logging.getLogger(__name__)

BackendFactory = Callable[["SettingsProvider", "Settings"], Awaitable[BlobBackendProtocol]]

FILE_CHUNK_SIZE = 64 * 1024  # 64KB


async def _read_file_chunks(path: str | Path, chunk_size: int) -> AsyncIterator[bytes]:
    """Yield file content in chunks without blocking the event loop."""
    async with aiofiles.open(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            yield chunk


class BlobStorage:
    """Blob storage over an injected backend capability.

    Missing blobs are not errors for deletes (no-op), URL lookups (None),
    and downloads (None). Other backend failures propagate as
    StorageTransportError subclasses naming the failing key.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        telemetry: TelemetryProtocol | None = None,
        backend_factory: BackendFactory | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize without touching the backend.

        Args:
            settings_provider: Source of connection settings and base path.
            telemetry: Sink for adapter problems; defaults to LoggingTelemetry.
            backend_factory: Coroutine creating the backend; defaults to
                BlobBackendFactory.create_backend.
            settings: Tuning settings; if None, uses get_settings().
        """
        self._settings_provider = settings_provider
        self._telemetry = telemetry or LoggingTelemetry()
        self._backend_factory = backend_factory or BlobBackendFactory.create_backend
        self._settings = settings or get_settings()
        self._backend: BlobBackendProtocol | None = None
        self._base_path = ""
        self._init_task: asyncio.Task[BlobBackendProtocol] | None = None

    @property
    def base_path(self) -> str:
        return self._base_path

    async def _create_backend(self) -> BlobBackendProtocol:
        base_path = await self._settings_provider.get_setting(SETTING_BASE_PATH)
        backend = await self._backend_factory(self._settings_provider, self._settings)
        self._base_path = normalize_path(base_path or "")
        self._backend = backend
        logger.info(
            "Blob storage initialized: backend=%s, base_path=%r",
            backend.name,
            self._base_path,
        )
        return backend

    async def _initialize(self) -> BlobBackendProtocol:
        """Return the backend, creating it on first use.

        A failed initialization is not memoized; the next call retries.
        """
        if self._backend is not None:
            return self._backend
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._create_backend())
        task = self._init_task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._init_task is task and task.done():
                self._init_task = None
            raise

    def _full_key(self, blob_key: str) -> str:
        return resolve_key(self._base_path, blob_key)

    def _track(self, message: str) -> None:
        self._telemetry.track_event(TELEMETRY_EVENT_NAME, {"message": message})

    @traced("blobstore.upload_blob")
    async def upload_blob(
        self, blob_key: str, content: bytes, content_type: str | None = None
    ) -> None:
        """Upload content under blob_key.

        Args:
            blob_key: Caller key, resolved against the base path.
            content: Blob content.
            content_type: MIME type; derived from the key's file name if omitted.
        """
        backend = await self._initialize()
        full_key = self._full_key(blob_key)
        await backend.upload(
            full_key, content, content_type or guess_content_type(full_key)
        )

    @traced("blobstore.upload_stream")
    async def upload_stream(
        self,
        blob_key: str,
        chunks: AsyncIterable[bytes] | BinaryIO,
        content_type: str | None = None,
    ) -> None:
        """Upload streamed content in blocks (block size and concurrency from settings)."""
        backend = await self._initialize()
        full_key = self._full_key(blob_key)
        await backend.upload_stream(
            full_key, chunks, content_type or guess_content_type(full_key)
        )

    @traced("blobstore.upload_file")
    async def upload_file(
        self,
        blob_key: str,
        path: str | Path,
        content_type: str | None = None,
    ) -> None:
        """Stream a local file into blob_key."""
        await self._initialize()
        if not await aiofiles.os.path.isfile(path):
            raise StorageUploadError(self._full_key(blob_key), f"File not found: {path}")
        await self.upload_stream(
            blob_key, _read_file_chunks(path, FILE_CHUNK_SIZE), content_type
        )

    @traced("blobstore.download_blob")
    async def download_blob(self, blob_key: str) -> bytes | None:
        """Return blob content, or None if the blob does not exist."""
        backend = await self._initialize()
        full_key = self._full_key(blob_key)
        try:
            return await backend.download(full_key)
        except StorageNotFoundError:
            logger.debug("Blob %s not found", full_key)
            self._track(
                f"Unable to download blob {backend.get_blob_url(full_key)}: not found"
            )
            return None
        except StorageDownloadError as e:
            self._track(
                f"Unable to download blob {backend.get_blob_url(full_key)}: "
                f"{e.details.get('reason')}"
            )
            raise

    @traced("blobstore.download_stream")
    async def download_stream(self, blob_key: str) -> AsyncIterator[bytes]:
        """Stream blob content. Raises StorageNotFoundError if missing."""
        backend = await self._initialize()
        async for chunk in backend.download_stream(self._full_key(blob_key)):
            yield chunk

    @traced("blobstore.list_blobs")
    async def list_blobs(self, blob_prefix: str | None = None) -> list[str]:
        """Return keys (relative to the base path) of all blobs under blob_prefix."""
        backend = await self._initialize()
        names = await backend.list_names(list_prefix(self._base_path, blob_prefix))
        return [
            strip_base_path(self._base_path, name)
            for name in names
            if is_under_base_path(self._base_path, name)
        ]

    @traced("blobstore.get_download_url")
    async def get_download_url(self, blob_key: str) -> str | None:
        """Return a URL the blob can be read from, or None if it does not exist."""
        backend = await self._initialize()
        full_key = self._full_key(blob_key)
        try:
            return await backend.get_download_url(full_key)
        except StorageNotFoundError:
            logger.debug("Blob %s not found; no download URL", full_key)
            return None

    @traced("blobstore.delete_blob")
    async def delete_blob(self, blob_key: str) -> None:
        """Delete blob_key; a missing blob is treated as already deleted."""
        backend = await self._initialize()
        full_key = self._full_key(blob_key)
        try:
            await backend.delete(full_key)
        except StorageNotFoundError:
            logger.debug("Blob %s already deleted", full_key)

    @traced("blobstore.delete_blob_folder")
    async def delete_blob_folder(self, blob_prefix: str) -> BatchOutcome:
        """Delete every blob under blob_prefix in batches.

        An empty prefix removes every blob under the base path, or every
        blob in the container when there is none. Blobs of a sibling base
        path (e.g. "site2/" next to "site") are never touched. Partial failures are counted, reported to telemetry, and
        returned; a failed batch submission aborts the rest.

        Raises:
            StorageNotSupportedError: Backend has no batch delete.
            StorageDeleteError: A batch submission failed.
        """
        backend = await self._initialize()
        if not backend.supports_batch_delete:
            raise StorageNotSupportedError("delete_blob_folder", backend.name)

        full_prefix = list_prefix(self._base_path, blob_prefix)
        names = [
            name
            for name in await backend.list_names(full_prefix)
            if is_under_base_path(self._base_path, name)
        ]
        batcher = BulkDeleteBatcher(backend.delete_batch)
        try:
            outcome = await batcher.delete_in_batches(
                names, self._settings.delete_batch_size
            )
        except StorageTransportError as e:
            raise StorageDeleteError(blob_prefix, e.message) from e

        if outcome.has_failures:
            self._track(
                f"Delete blob folder failed for '{blob_prefix}': "
                f"{outcome.total_failed} items."
            )
        logger.info(
            "Deleted blob folder %r: %s requested, %s failed, %s batches",
            full_prefix,
            outcome.total_requested,
            outcome.total_failed,
            outcome.batch_count,
        )
        return outcome

    @traced("blobstore.create_container")
    async def create_container(self) -> None:
        """Create the container if it does not exist."""
        backend = await self._initialize()
        await backend.create_container()

    @traced("blobstore.delete_container")
    async def delete_container(self) -> None:
        """Delete the container if it exists."""
        backend = await self._initialize()
        await backend.delete_container()

    async def close(self) -> None:
        """Release the backend; the next call initializes a new one.

        A pending initialization is cancelled first so the client it would
        create is not left open.
        """
        task = self._init_task
        self._init_task = None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        backend = self._backend
        self._backend = None
        if backend is not None:
            await backend.close()

    async def __aenter__(self) -> "BlobStorage":
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        await self.close()
