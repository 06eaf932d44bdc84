"""Blob key normalization and base-path prefixing.

A storage key is always relative, uses forward slashes only, and has no
trailing slash. Keys from callers may come from Windows paths or URL
fragments, so both separators and runs of slashes are accepted.
"""

import re

_SLASH_RUN_RE = re.compile(r"/{2,}")


def normalize_path(path: str) -> str:
    """Normalize separators and strip one leading and one trailing slash.

    Total over strings; "" yields "".
    """
    if not path:
        return ""
    path = _SLASH_RUN_RE.sub("/", path.replace("\\", "/"))
    if path.startswith("/"):
        path = path[1:]
    if path.endswith("/"):
        path = path[:-1]
    return path


def resolve_key(base_path: str, raw_key: str) -> str:
    """Return the canonical storage key for raw_key under base_path.

    The combined string is normalized again since joining an empty or
    slash-terminated part can reintroduce a double slash.

    Examples:
        resolve_key("", "a/b") -> "a/b"
        resolve_key("base", "/a//b/") -> "base/a/b"
    """
    key = normalize_path(raw_key)
    if not base_path:
        return key
    return normalize_path(f"{base_path}/{key}")


def list_prefix(base_path: str, raw_prefix: str | None) -> str | None:
    """Return the name prefix that lists raw_prefix inside base_path.

    With a base path the prefix always starts with "base/", so a sibling
    such as "base2/..." never matches. None means the whole container.
    """
    prefix = normalize_path(raw_prefix or "")
    if not base_path:
        return prefix or None
    return f"{base_path}/{prefix}"


def is_under_base_path(base_path: str, storage_key: str) -> bool:
    """Return True if storage_key is a blob inside base_path."""
    return not base_path or storage_key.startswith(f"{base_path}/")


def strip_base_path(base_path: str, storage_key: str) -> str:
    """Return storage_key relative to base_path (inverse of resolve_key).

    Raises:
        ValueError: storage_key lies outside base_path.
    """
    if not base_path:
        return storage_key
    if not is_under_base_path(base_path, storage_key):
        raise ValueError(f"Blob {storage_key!r} is outside base path {base_path!r}")
    return storage_key[len(base_path) + 1:]
