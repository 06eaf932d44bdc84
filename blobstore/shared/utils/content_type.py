"""Content type lookup from blob keys."""

import mimetypes

from blobstore.core.constants import DEFAULT_CONTENT_TYPE


def guess_content_type(blob_key: str) -> str:
    """Return the MIME type for the key's file name, or application/octet-stream.

    Only the last path segment is considered, so directory names containing
    dots do not influence the result.
    """
    file_name = blob_key.rsplit("/", 1)[-1]
    if not file_name:
        return DEFAULT_CONTENT_TYPE
    content_type, _ = mimetypes.guess_type(file_name, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE
