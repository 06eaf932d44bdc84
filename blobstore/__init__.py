"""blobstore: Azure Blob Storage adapter for content-management hosts.

Hosts call setup_telemetry() once at startup for logging and tracing, then
share one BlobStorage per container.
"""

from blobstore.core.settings_provider import (
    EnvironmentSettingsProvider,
    StaticSettingsProvider,
)
from blobstore.domain.exceptions import BlobStoreException, ConfigurationError
from blobstore.domain.value_objects import BatchOutcome
from blobstore.infrastructure.exceptions import (
    StorageNotFoundError,
    StorageNotSupportedError,
    StorageTransportError,
)
from blobstore.infrastructure.storage import BlobStorage, resolve_key
from blobstore.shared.telemetry import setup_telemetry

__all__ = [
    "BatchOutcome",
    "BlobStorage",
    "BlobStoreException",
    "ConfigurationError",
    "EnvironmentSettingsProvider",
    "StaticSettingsProvider",
    "StorageNotFoundError",
    "StorageNotSupportedError",
    "StorageTransportError",
    "resolve_key",
    "setup_telemetry",
]
