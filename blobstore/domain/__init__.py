"""Domain layer: exceptions and value objects.

No dependencies on the Azure SDK. Used by core and infrastructure layers.
"""

from blobstore.domain.exceptions import BlobStoreException, ConfigurationError
from blobstore.domain.value_objects import BatchOutcome

__all__ = [
    "BatchOutcome",
    "BlobStoreException",
    "ConfigurationError",
]
