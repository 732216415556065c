"""
Unit tests for the helper-mode file operations.
"""

import base64

import pytest

from dockyard.helpers.file_utils import (
    decode_and_write_file,
    read_and_encode_file,
    read_file,
    write_file,
)


@pytest.mark.unit
class TestFileUtils:
    """Tests for write/read helpers."""

    def test_write_file_creates_parents(self, tmp_path):
        target = tmp_path / "dockyard" / "containers" / "web" / "backup.json"

        write_file("hello", str(target))

        assert target.read_text() == "hello"

    def test_decode_and_write_file(self, tmp_path):
        target = tmp_path / "out"
        contents = '{"name": "web"}'

        decode_and_write_file(base64.b64encode(contents.encode()).decode(), str(target))

        assert target.read_text() == contents

    def test_decode_invalid_base64_raises(self, tmp_path):
        with pytest.raises(ValueError):
            decode_and_write_file("not base64!!", str(tmp_path / "out"))

    def test_read_file(self, tmp_path):
        target = tmp_path / "in"
        target.write_text("some contents")

        assert read_file(str(target)) == "some contents"

    def test_read_and_encode_file(self, tmp_path):
        target = tmp_path / "in"
        target.write_text("some contents")

        encoded = read_and_encode_file(str(target))

        assert base64.b64decode(encoded).decode() == "some contents"

    def test_read_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_file(str(tmp_path / "missing"))
