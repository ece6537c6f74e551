"""
Tests for file service: critical for safe linking and deletion.
A failed operation must never lose the original file.
"""
import os
from unittest import mock
import pytest
from pathlib import Path
from dupsieve.services.file_service import FileService


class TestReplaceWithLink:

    def test_duplicate_becomes_link_to_master(self, tmp_path):
        master = tmp_path / "master"
        duplicate = tmp_path / "duplicate"
        master.write_bytes(b"content")
        duplicate.write_bytes(b"content")

        FileService.replace_with_link(str(master), str(duplicate))

        assert os.stat(master).st_ino == os.stat(duplicate).st_ino
        assert os.stat(master).st_nlink == 2
        assert duplicate.read_bytes() == b"content"

    def test_no_temporary_file_left_behind(self, tmp_path):
        master = tmp_path / "master"
        duplicate = tmp_path / "duplicate"
        master.write_bytes(b"content")
        duplicate.write_bytes(b"content")

        FileService.replace_with_link(str(master), str(duplicate))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["duplicate", "master"]

    def test_already_linked_is_left_alone(self, tmp_path):
        master = tmp_path / "master"
        master.write_bytes(b"content")
        duplicate = tmp_path / "duplicate"
        os.link(master, duplicate)

        with mock.patch("dupsieve.services.file_service.os.link") as mock_link:
            FileService.replace_with_link(str(master), str(duplicate))
            mock_link.assert_not_called()

        assert os.stat(master).st_nlink == 2

    def test_missing_master_keeps_duplicate(self, tmp_path):
        """CRITICAL: if the link cannot be created the duplicate must survive untouched."""
        duplicate = tmp_path / "duplicate"
        duplicate.write_bytes(b"precious")

        with pytest.raises(RuntimeError, match="unable to link"):
            FileService.replace_with_link(str(tmp_path / "missing"), str(duplicate))

        assert duplicate.read_bytes() == b"precious"

    def test_failed_rename_removes_temporary_link(self, tmp_path):
        master = tmp_path / "master"
        duplicate = tmp_path / "duplicate"
        master.write_bytes(b"content")
        duplicate.write_bytes(b"content")

        with mock.patch("dupsieve.services.file_service.os.replace", side_effect=OSError(1, "denied")):
            with pytest.raises(RuntimeError, match="unable to replace"):
                FileService.replace_with_link(str(master), str(duplicate))

        assert sorted(p.name for p in tmp_path.iterdir()) == ["duplicate", "master"]
        assert os.stat(master).st_nlink == 1


class TestSameStorage:

    def test_hard_links_share_storage(self, linked_files):
        assert FileService.same_storage(str(linked_files["a"]), str(linked_files["b"]))

    def test_copies_do_not_share_storage(self, linked_files):
        assert not FileService.same_storage(str(linked_files["a"]), str(linked_files["c"]))

    def test_missing_path_is_not_same_storage(self, tmp_path, linked_files):
        assert not FileService.same_storage(str(linked_files["a"]), str(tmp_path / "nope"))


class TestDeleteFile:

    def test_removes_file(self, tmp_path):
        target = tmp_path / "delete_me.txt"
        target.write_text("content")

        FileService.delete_file(str(target))

        assert not target.exists()

    def test_preserves_other_files_in_directory(self, tmp_path):
        keep = tmp_path / "keep_me.txt"
        target = tmp_path / "delete_me.txt"
        keep.write_text("keep")
        target.write_text("delete")

        FileService.delete_file(str(target))

        assert keep.exists()
        assert keep.read_text() == "keep"

    def test_missing_file_raises_runtime_error(self, tmp_path):
        with pytest.raises(RuntimeError, match="unable to delete"):
            FileService.delete_file(str(tmp_path / "does_not_exist.txt"))


class TestMoveToTrash:
    """send2trash is patched: the tests check our wrapper, not the desktop trash."""

    def test_passes_absolute_path_to_send2trash(self, tmp_path, monkeypatch):
        target = tmp_path / "my photo.jpg"
        target.write_text("content")
        monkeypatch.chdir(tmp_path)

        with mock.patch("dupsieve.services.file_service.send2trash") as mock_trash:
            FileService.move_to_trash("my photo.jpg")

        mock_trash.assert_called_once_with(str(Path.cwd() / "my photo.jpg"))

    def test_raises_runtime_error_for_nonexistent_file(self, tmp_path):
        with mock.patch("dupsieve.services.file_service.send2trash") as mock_trash:
            with pytest.raises(RuntimeError, match="File not found"):
                FileService.move_to_trash(str(tmp_path / "does_not_exist.txt"))
            mock_trash.assert_not_called()

    def test_send2trash_failure_is_wrapped(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("content")

        with mock.patch("dupsieve.services.file_service.send2trash", side_effect=OSError("no trash")):
            with pytest.raises(RuntimeError, match="Failed to move to trash"):
                FileService.move_to_trash(str(target))

        assert target.exists()
