"""
Unit tests for the archive codec behind ``backup directory`` and
``restore directory``.
"""

import tarfile

import pytest

from dockyard.helpers.archive import backup_directory, restore_directory
from dockyard.helpers.errors import ArchiveError


def make_tree(root, count=100):
    root.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        (root / str(i)).write_text(f"data {i}")
    return root


@pytest.mark.unit
class TestBackupDirectory:
    """Tests for backup_directory()."""

    def test_returns_path_relative_to_output(self, tmp_path):
        source = make_tree(tmp_path / "input", count=3)
        output = tmp_path / "output"

        created = backup_directory(str(source), str(output))

        assert not created.startswith("/")
        assert created.endswith(".tgz")
        assert (output / created).is_file()

    def test_uses_explicit_name(self, tmp_path):
        source = make_tree(tmp_path / "input", count=1)

        created = backup_directory(str(source), str(tmp_path / "output"), name="nightly")

        assert created == "nightly.tgz"

    def test_creates_missing_output_directory(self, tmp_path):
        source = make_tree(tmp_path / "input", count=1)
        output = tmp_path / "deep" / "nested" / "output"

        created = backup_directory(str(source), str(output))

        assert (output / created).exists()

    def test_archive_contains_every_file(self, tmp_path):
        source = make_tree(tmp_path / "input", count=5)
        output = tmp_path / "output"

        created = backup_directory(str(source), str(output))

        with tarfile.open(output / created, "r:gz") as tar:
            names = {name.lstrip("./") for name in tar.getnames()}
        assert {str(i) for i in range(5)} <= names

    def test_plain_file_is_copied(self, tmp_path):
        source = tmp_path / "settings.json"
        source.write_text("I am some contents")
        output = tmp_path / "output"

        created = backup_directory(str(source), str(output), name="copy")

        assert created == "copy"
        assert (output / "copy").read_text() == "I am some contents"

    def test_missing_input_raises(self, tmp_path):
        with pytest.raises(ArchiveError, match="does not exist"):
            backup_directory(str(tmp_path / "missing"), str(tmp_path / "output"))


@pytest.mark.unit
class TestRestoreDirectory:
    """Tests for restore_directory()."""

    def test_round_trip_hundred_files(self, tmp_path):
        source = make_tree(tmp_path / "input", count=100)
        output = tmp_path / "output"
        restored = tmp_path / "restored"

        created = backup_directory(str(source), str(output))
        restore_directory(str(output / created), str(restored))

        files = sorted(p for p in restored.iterdir() if p.is_file())
        assert len(files) == 100
        for path in files:
            assert path.read_text() == f"data {path.name}"

    def test_round_trip_keeps_subdirectories(self, tmp_path):
        source = tmp_path / "input"
        (source / "conf" / "sites").mkdir(parents=True)
        (source / "conf" / "sites" / "default").write_bytes(b"\x00\x01binary")

        created = backup_directory(str(source), str(tmp_path / "output"))
        restore_directory(str(tmp_path / "output" / created), str(tmp_path / "restored"))

        assert (tmp_path / "restored" / "conf" / "sites" / "default").read_bytes() == b"\x00\x01binary"

    def test_missing_archive_raises(self, tmp_path):
        with pytest.raises(ArchiveError, match="not found"):
            restore_directory(str(tmp_path / "missing.tgz"), str(tmp_path / "out"))

    def test_non_archive_raises(self, tmp_path):
        bogus = tmp_path / "bogus.tgz"
        bogus.write_text("not a tarball")

        with pytest.raises(ArchiveError, match="Not a readable archive"):
            restore_directory(str(bogus), str(tmp_path / "out"))
