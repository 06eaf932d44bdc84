"""Storage: Azure Blob backends behind one facade.

BlobStorage resolves keys and delegates to a backend created by
BlobBackendFactory on first use. Backends implement BlobBackendProtocol
(upload, download, list, delete, batch delete, download URL, container
lifecycle).
"""

from blobstore.infrastructure.storage.batching import BulkDeleteBatcher
from blobstore.infrastructure.storage.blob_storage import BlobStorage
from blobstore.infrastructure.storage.factory import BlobBackendFactory
from blobstore.infrastructure.storage.key_resolver import normalize_path, resolve_key
from blobstore.infrastructure.storage.protocol import (
    BlobBackendProtocol,
    BlobStorageProtocol,
)

__all__ = [
    "BlobBackendFactory",
    "BlobBackendProtocol",
    "BlobStorage",
    "BlobStorageProtocol",
    "BulkDeleteBatcher",
    "normalize_path",
    "resolve_key",
]
