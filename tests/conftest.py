"""Pytest configuration and fixtures for blobstore.

Backends are MagicMock objects with AsyncMock coroutine methods so the
facade can be exercised without the Azure SDK reaching the network.
"""

from collections.abc import AsyncIterator, Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from blobstore.core.config import Settings
from blobstore.core.settings_provider import StaticSettingsProvider
from blobstore.infrastructure.storage.blob_storage import BlobStorage

_BACKEND_COROUTINES = (
    "upload",
    "upload_stream",
    "download",
    "list_names",
    "delete",
    "delete_batch",
    "get_download_url",
    "create_container",
    "delete_container",
    "close",
)


async def aiter_of(items: Iterable[Any]) -> AsyncIterator[Any]:
    """Async iterator over items (stands in for SDK pagers and batch responses)."""
    for item in items:
        yield item


def make_backend(supports_batch_delete: bool = True) -> MagicMock:
    """Backend double implementing BlobBackendProtocol."""
    backend = MagicMock()
    backend.name = "fake"
    backend.supports_batch_delete = supports_batch_delete
    for method in _BACKEND_COROUTINES:
        setattr(backend, method, AsyncMock())
    backend.list_names.return_value = []
    backend.delete_batch.return_value = 0
    backend.get_blob_url = MagicMock(
        side_effect=lambda name: f"https://acct.blob.core.windows.net/content/{name}"
    )
    return backend


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env)."""
    return Settings(_env_file=None)


@pytest.fixture
def backend() -> MagicMock:
    return make_backend()


@pytest.fixture
def telemetry() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_storage(settings: Settings, telemetry: MagicMock):
    """Build a BlobStorage over a backend double with an optional base path."""

    def _make(backend: MagicMock, base_path: str = "") -> BlobStorage:
        provider = StaticSettingsProvider({"blob_storage_base_path": base_path})
        return BlobStorage(
            provider,
            telemetry=telemetry,
            backend_factory=AsyncMock(return_value=backend),
            settings=settings,
        )

    return _make


@pytest.fixture
def storage(make_storage, backend: MagicMock) -> BlobStorage:
    """BlobStorage under base path 'site'."""
    return make_storage(backend, base_path="site")
