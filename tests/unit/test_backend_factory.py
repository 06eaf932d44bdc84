"""Unit tests for BlobBackendFactory backend selection."""

from unittest.mock import MagicMock, patch

import pytest

from blobstore.core.config import Settings
from blobstore.core.settings_provider import StaticSettingsProvider
from blobstore.domain.exceptions import ConfigurationError
from blobstore.infrastructure.storage.azure_backends import (
    AzureContainerUrlBackend,
    AzureServiceBackend,
)
from blobstore.infrastructure.storage.factory import BlobBackendFactory

CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;AccountName=acct;"
    "AccountKey=a2V5;EndpointSuffix=core.windows.net"
)
CONTAINER_URL = "https://acct.blob.core.windows.net/content?sv=2021&sig=abc"


@pytest.fixture
def browser_settings() -> Settings:
    return Settings(_env_file=None, deployment_target="browser")


@pytest.fixture
def service_factory():
    with patch.object(AzureServiceBackend, "from_connection_string") as factory:
        factory.return_value = MagicMock(name="service_backend")
        yield factory


@pytest.fixture
def url_factory():
    with patch.object(AzureContainerUrlBackend, "from_container_url") as factory:
        factory.return_value = MagicMock(name="url_backend")
        yield factory


@pytest.mark.asyncio
async def test_server_prefers_connection_string(
    settings: Settings, service_factory, url_factory
) -> None:
    provider = StaticSettingsProvider({
        "blob_storage_connection_string": CONNECTION_STRING,
        "blob_storage_container": "content",
        "blob_storage_url": CONTAINER_URL,
    })
    backend = await BlobBackendFactory.create_backend(provider, settings)
    assert backend is service_factory.return_value
    service_factory.assert_called_once_with(CONNECTION_STRING, "content", settings)
    url_factory.assert_not_called()


@pytest.mark.asyncio
async def test_server_connection_string_requires_container(
    settings: Settings, service_factory
) -> None:
    provider = StaticSettingsProvider({"blob_storage_connection_string": CONNECTION_STRING})
    with pytest.raises(ConfigurationError) as exc_info:
        await BlobBackendFactory.create_backend(provider, settings)
    assert exc_info.value.details["setting"] == "blob_storage_container"
    service_factory.assert_not_called()


@pytest.mark.asyncio
async def test_server_falls_back_to_container_url(
    settings: Settings, service_factory, url_factory
) -> None:
    provider = StaticSettingsProvider({"blob_storage_url": CONTAINER_URL})
    backend = await BlobBackendFactory.create_backend(provider, settings)
    assert backend is url_factory.return_value
    url_factory.assert_called_once_with(CONTAINER_URL, settings)


@pytest.mark.asyncio
async def test_server_without_credentials(settings: Settings) -> None:
    with pytest.raises(ConfigurationError, match="blob_storage_connection_string.*blob_storage_url"):
        await BlobBackendFactory.create_backend(StaticSettingsProvider({}), settings)


@pytest.mark.asyncio
async def test_malformed_connection_string(settings: Settings, service_factory) -> None:
    service_factory.side_effect = ValueError("Connection string is either blank or malformed.")
    provider = StaticSettingsProvider({
        "blob_storage_connection_string": "nonsense",
        "blob_storage_container": "content",
    })
    with pytest.raises(ConfigurationError) as exc_info:
        await BlobBackendFactory.create_backend(provider, settings)
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_browser_ignores_connection_string(
    browser_settings: Settings, service_factory, url_factory
) -> None:
    provider = StaticSettingsProvider({
        "blob_storage_connection_string": CONNECTION_STRING,
        "blob_storage_container": "content",
        "blob_storage_url": CONTAINER_URL,
    })
    backend = await BlobBackendFactory.create_backend(provider, browser_settings)
    assert backend is url_factory.return_value
    service_factory.assert_not_called()


@pytest.mark.asyncio
async def test_browser_requires_container_url(
    browser_settings: Settings, service_factory
) -> None:
    provider = StaticSettingsProvider({
        "blob_storage_connection_string": CONNECTION_STRING,
        "blob_storage_container": "content",
    })
    with pytest.raises(ConfigurationError) as exc_info:
        await BlobBackendFactory.create_backend(provider, browser_settings)
    assert exc_info.value.details["setting"] == "blob_storage_url"
