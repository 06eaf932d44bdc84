"""Backend factory: selects the Azure backend from settings at startup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blobstore.core.constants import (
    SETTING_CONNECTION_STRING,
    SETTING_CONTAINER,
    SETTING_STORAGE_URL,
    TARGET_SERVER,
)
from blobstore.domain.exceptions import ConfigurationError
from blobstore.infrastructure.storage.azure_backends import (
    AzureContainerUrlBackend,
    AzureServiceBackend,
)
from blobstore.infrastructure.storage.protocol import BlobBackendProtocol

if TYPE_CHECKING:
    from blobstore.core.config import Settings
    from blobstore.core.settings_provider import SettingsProvider

logger = logging.getLogger(__name__)


class BlobBackendFactory:
    """Factory for backend instances based on deployment target and settings."""

    @staticmethod
    async def create_backend(
        settings_provider: "SettingsProvider",
        settings: "Settings | None" = None,
    ) -> BlobBackendProtocol:
        """Create a backend from provider settings.

        The server target prefers a connection string and falls back to a
        container URL; the browser target accepts only a container URL.

        Args:
            settings_provider: Source of connection settings.
            settings: Tuning settings; if None, uses get_settings().

        Returns:
            AzureServiceBackend or AzureContainerUrlBackend.

        Raises:
            ConfigurationError: Required setting missing or malformed.
        """
        from blobstore.core.config import get_settings

        s = settings or get_settings()
        target = s.deployment_target

        if target == TARGET_SERVER:
            connection_string = await settings_provider.get_setting(
                SETTING_CONNECTION_STRING
            )
            if connection_string:
                container_name = await settings_provider.get_setting(SETTING_CONTAINER)
                if not container_name:
                    raise ConfigurationError(
                        f'Setting "{SETTING_CONTAINER}" required to initialize blob storage.',
                        SETTING_CONTAINER,
                    )
                try:
                    backend = AzureServiceBackend.from_connection_string(
                        connection_string, container_name, s
                    )
                except ValueError as e:
                    raise ConfigurationError(
                        f'Setting "{SETTING_CONNECTION_STRING}" is not a valid connection string.',
                        SETTING_CONNECTION_STRING,
                    ) from e
                logger.info(
                    "Blob storage using connection string, container %s", container_name
                )
                return backend

        storage_url = await settings_provider.get_setting(SETTING_STORAGE_URL)
        if storage_url:
            try:
                backend = AzureContainerUrlBackend.from_container_url(storage_url, s)
            except ValueError as e:
                raise ConfigurationError(
                    f'Setting "{SETTING_STORAGE_URL}" is not a valid container URL.',
                    SETTING_STORAGE_URL,
                ) from e
            logger.info("Blob storage using container URL (%s target)", target)
            return backend

        if target == TARGET_SERVER:
            raise ConfigurationError(
                f'Setting "{SETTING_CONNECTION_STRING}" or "{SETTING_STORAGE_URL}" '
                "required to initialize blob storage.",
                SETTING_CONNECTION_STRING,
            )
        raise ConfigurationError(
            f'Setting "{SETTING_STORAGE_URL}" required to initialize blob storage.',
            SETTING_STORAGE_URL,
        )
