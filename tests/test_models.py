"""
Unit tests for data models: registry uniqueness, digest table bookkeeping
and parameter validation.
"""
import dataclasses
import pytest
from dupsieve.core.models import (
    CandidateRegistry, DigestTable, DuplicateSet, FileRecord,
    DispositionAction, ScanParams, ScanStats
)
from dupsieve.core.hasher import ALGORITHMS


class TestCandidateRegistry:
    """The registry holds each path at most once."""

    def test_rejects_second_insert_of_same_path(self):
        registry = CandidateRegistry()
        first = FileRecord(path="/a", size=1, inode=1)
        second = FileRecord(path="/a", size=99, inode=2)

        assert registry.add(first) is True
        assert registry.add(second) is False

        # Never overwritten
        assert len(registry) == 1
        assert registry.get("/a") is first

    def test_iterates_in_lexicographic_path_order(self):
        registry = CandidateRegistry()
        for path in ["/z", "/a/b", "/a", "/m"]:
            registry.add(FileRecord(path=path, size=1))

        assert [r.path for r in registry] == ["/a", "/a/b", "/m", "/z"]
        assert registry.paths() == ["/a", "/a/b", "/m", "/z"]

    def test_contains(self):
        registry = CandidateRegistry()
        registry.add(FileRecord(path="/a", size=1))
        assert "/a" in registry
        assert "/b" not in registry


class TestFileRecord:
    def test_records_are_immutable(self):
        record = FileRecord(path="/a", size=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.size = 2

    def test_storage_id(self):
        record = FileRecord(path="/a", size=1, device=7, inode=42)
        assert record.storage_id == (7, 42)

    def test_from_stat(self, tmp_path):
        f = tmp_path / "file.bin"
        f.write_bytes(b"12345")
        st = f.stat()

        record = FileRecord.from_stat(str(f), st)

        assert record.path == str(f)
        assert record.size == 5
        assert record.hard_links == 1
        assert record.storage_id == (st.st_dev, st.st_ino)


class TestDigestTable:
    def test_creates_bucket_on_first_occurrence_and_appends(self):
        table = DigestTable()
        a = FileRecord(path="/a", size=1)
        b = FileRecord(path="/b", size=1)
        c = FileRecord(path="/c", size=1)

        table.add("d1", a)
        table.add("d2", b)
        table.add("d1", c)

        assert len(table) == 2
        assert table.get("d1").members == [a, c]
        assert table.get("d2").members == [b]

    def test_duplicate_buckets_ignore_single_members(self):
        table = DigestTable()
        table.add("d1", FileRecord(path="/a", size=1))
        table.add("d1", FileRecord(path="/b", size=1))
        table.add("d2", FileRecord(path="/c", size=1))

        duplicates = table.duplicate_buckets()
        assert [b.digest for b in duplicates] == ["d1"]


class TestDuplicateSet:
    def test_reclaimable_bytes_counts_only_duplicates(self):
        master = FileRecord(path="/a", size=100)
        dups = [FileRecord(path="/b", size=100), FileRecord(path="/c", size=100)]
        duplicate_set = DuplicateSet(digest="d", master=master, duplicates=dups)

        assert duplicate_set.reclaimable_bytes == 200
        assert duplicate_set.files == [master] + dups


class TestScanParams:
    def test_defaults_to_list_action(self):
        params = ScanParams(paths=["/tmp"])
        assert params.action == DispositionAction.LIST

    def test_requires_some_input(self):
        with pytest.raises(ValueError, match="nothing to do"):
            ScanParams(paths=[])

    def test_stdin_alone_is_enough_input(self):
        params = ScanParams(paths=[], read_stdin=True)
        assert params.read_stdin is True

    def test_link_and_delete_are_mutually_exclusive(self):
        with pytest.raises(ValueError, match="mutually exclusive"):
            ScanParams.from_flags(["/tmp"], link=True, delete=True)

    @pytest.mark.parametrize("link, delete, expected", [
        (False, False, DispositionAction.LIST),
        (True, False, DispositionAction.LINK),
        (False, True, DispositionAction.DELETE),
    ])
    def test_from_flags_selects_action(self, link, delete, expected):
        params = ScanParams.from_flags(["/tmp"], link=link, delete=delete)
        assert params.action == expected

    def test_trash_requires_delete(self):
        with pytest.raises(ValueError, match="trash"):
            ScanParams(paths=["/tmp"], use_trash=True)

    def test_jobs_must_be_positive(self):
        with pytest.raises(ValueError, match="jobs"):
            ScanParams(paths=["/tmp"], jobs=0)

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(ValueError, match="Unknown digest algorithm"):
            ScanParams(paths=["/tmp"], algorithm="crc32")

    @pytest.mark.parametrize("name", sorted(ALGORITHMS))
    def test_every_registered_algorithm_accepted(self, name):
        assert ScanParams(paths=["/tmp"], algorithm=name).algorithm == name


class TestScanStats:
    def test_summary_mentions_reclaimable_space(self):
        stats = ScanStats()
        stats.update_stage("digest", 1, 2, 0.01)
        stats.record_duplicate_set(DuplicateSet(
            digest="d",
            master=FileRecord(path="/a", size=2048),
            duplicates=[FileRecord(path="/b", size=2048)]
        ))

        summary = stats.print_summary()

        assert "1 files in 1 sets" in summary
        assert "2.00KB reclaimable" in summary
        assert "Digest buckets: 1 / 2" in summary
