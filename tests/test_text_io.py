"""Tests for save/clipboard text helpers."""

from __future__ import annotations

import pytest

from ascii_export import (
    basename,
    dirname,
    ensure_default_extension,
    has_extension,
    is_valid_save_path,
    join_path,
    normalize_for_clipboard,
    normalize_for_save,
    strip_utf8_bom,
)


class TestNormalization:
    def test_strip_utf8_bom(self):
        assert strip_utf8_bom("\ufeffabc") == "abc"
        assert strip_utf8_bom("abc") == "abc"
        assert strip_utf8_bom("") == ""

    def test_normalize_for_save(self):
        assert normalize_for_save("a\r\nb\rc\x00d\n", "lf") == "a\nb\ncd\n"
        assert normalize_for_save("a\r\nb\rc\x00d\n", "crlf") == "a\r\nb\r\ncd\r\n"

    def test_normalize_for_clipboard(self):
        assert normalize_for_clipboard("a\nb\r\nc\rd", "windows") == "a\r\nb\r\nc\r\nd"
        assert normalize_for_clipboard("a\r\nb", "other") == "a\nb"


class TestPaths:
    def test_basename_and_dirname(self):
        assert basename("C:\\a\\b\\file.txt") == "file.txt"
        assert basename("/tmp/x") == "x"
        assert dirname("C:\\a\\b\\file.txt") == "C:\\a\\b"
        assert dirname("/tmp/x") == "/tmp"
        assert dirname("file.txt") == ""

    def test_join_path(self):
        assert join_path("", "f.txt") == "f.txt"
        assert join_path("/tmp/", "f.txt") == "/tmp/f.txt"
        assert join_path("C:\\out", "f.txt") == "C:\\out\\f.txt"

    def test_has_extension(self):
        assert has_extension("a/b.txt")
        assert not has_extension("a/b")
        assert not has_extension("a/b.")
        assert not has_extension("..")

    def test_ensure_default_extension(self):
        assert ensure_default_extension("C:\\a\\b\\file.txt", "txt") == "C:\\a\\b\\file.txt"
        assert ensure_default_extension("C:\\a\\b\\file", "txt") == "C:\\a\\b\\file.txt"
        assert ensure_default_extension(".env", "txt") == ".env"

    @pytest.mark.parametrize("path, expected", [
        ("C:\\a\\b\\good.txt", True),
        ("C:\\a\\b\\bad<.txt", False),
        ("C:\\a\\b\\con.txt", False),
        ("C:\\a\\b\\COM3", False),
        ("C:\\a\\b\\trail. ", False),
        ("C:\\a\\b\\", False),
        ("", False),
    ])
    def test_windows_save_paths(self, path, expected):
        assert is_valid_save_path(path, "windows") is expected

    def test_other_platform_is_permissive(self):
        assert is_valid_save_path("/tmp/con.txt", "other")
        assert not is_valid_save_path("/tmp/..", "other")
        assert not is_valid_save_path("/tmp/a\x00b", "other")
