"""Shared utilities: datetime and content type lookup."""

from blobstore.shared.utils.content_type import guess_content_type
from blobstore.shared.utils.datetime import utc_now

__all__ = [
    "guess_content_type",
    "utc_now",
]
