"""Unit tests for blob key normalization and base-path prefixing."""

import pytest

from blobstore.infrastructure.storage.key_resolver import (
    is_under_base_path,
    list_prefix,
    normalize_path,
    resolve_key,
    strip_base_path,
)


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_empty_stays_empty(self) -> None:
        assert normalize_path("") == ""

    def test_backslashes_converted(self) -> None:
        assert normalize_path("images\\logo.png") == "images/logo.png"

    def test_slash_runs_collapsed(self) -> None:
        assert normalize_path("a///b//c") == "a/b/c"

    def test_leading_and_trailing_stripped(self) -> None:
        assert normalize_path("/a/b/") == "a/b"

    def test_only_slashes_yield_empty(self) -> None:
        assert normalize_path("//\\//") == ""


class TestResolveKey:
    """Tests for resolve_key."""

    def test_no_base_path(self) -> None:
        assert resolve_key("", "a/b") == "a/b"

    def test_base_path_prefixed(self) -> None:
        assert resolve_key("base", "/a//b/") == "base/a/b"

    def test_empty_key_under_base_path(self) -> None:
        assert resolve_key("base", "") == "base"

    def test_both_empty(self) -> None:
        assert resolve_key("", "") == ""

    def test_join_does_not_double_slash(self) -> None:
        assert resolve_key("base/", "/file.txt") == "base/file.txt"

    def test_windows_path_under_base(self) -> None:
        assert resolve_key("site", "\\docs\\\\guide.pdf") == "site/docs/guide.pdf"

    @pytest.mark.parametrize(
        "raw_key",
        [
            "a\\b\\c",
            "//a//b//",
            "\\\\server\\share\\file",
            "a/\\/b",
            "/",
            "x//",
        ],
    )
    def test_output_is_canonical(self, raw_key: str) -> None:
        for base in ("", "base", "base/nested"):
            key = resolve_key(base, raw_key)
            assert "\\" not in key
            assert "//" not in key
            assert not key.startswith("/")
            assert not key.endswith("/")


class TestStripBasePath:
    """Tests for strip_base_path."""

    def test_no_base_path(self) -> None:
        assert strip_base_path("", "a/b") == "a/b"

    def test_prefix_removed(self) -> None:
        assert strip_base_path("site", "site/a/b") == "a/b"

    @pytest.mark.parametrize("storage_key", ["site2/a", "site", "other/site/a"])
    def test_name_outside_base_path_rejected(self, storage_key: str) -> None:
        with pytest.raises(ValueError, match="outside base path"):
            strip_base_path("site", storage_key)


class TestBasePathScope:
    """Tests for list_prefix and is_under_base_path."""

    def test_no_base_path_no_prefix_lists_everything(self) -> None:
        assert list_prefix("", None) is None
        assert list_prefix("", "/") is None

    def test_no_base_path_prefix_normalized(self) -> None:
        assert list_prefix("", "/img//") == "img"

    def test_empty_prefix_ends_with_separator(self) -> None:
        assert list_prefix("site", "") == "site/"
        assert list_prefix("site", None) == "site/"

    def test_caller_prefix_joined_under_base(self) -> None:
        assert list_prefix("site", "\\img\\") == "site/img"

    def test_sibling_is_not_under_base_path(self) -> None:
        assert is_under_base_path("site", "site/a.txt")
        assert not is_under_base_path("site", "site2/a.txt")
        assert not is_under_base_path("site", "site")
        assert is_under_base_path("", "site2/a.txt")
