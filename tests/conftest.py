"""
Shared fixtures for duplicate search tests.
Creates isolated temporary directories with controlled test files.
"""
import logging
import os
import sys
import pytest
import tempfile
from pathlib import Path
from typing import Callable, Dict

from dupsieve.core.models import FileRecord


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_logger_level():
    """CLI runs set the package logger level; restore it so tests stay independent."""
    yield
    logging.getLogger("dupsieve").setLevel(logging.NOTSET)


@pytest.fixture
def record_of() -> Callable[[Path], FileRecord]:
    """Returns a helper building a FileRecord from an existing file."""
    def _record(path: Path) -> FileRecord:
        return FileRecord.from_stat(str(path), os.lstat(path))
    return _record


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - 2 identical files (duplicates)
    - 2 identical files with different content (second duplicate pair)
    - 2 unique files
    - 1 empty file
    - 1 file in a subdirectory, identical to the first pair
    """
    files = {}

    # Duplicate pair #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (20KB of 'B', spans several read chunks)
    content_b = b"B" * 20 * 1024
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Subdirectory with duplicates
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)  # Same as dup1_a/b

    return files


@pytest.fixture
def linked_files(temp_dir) -> Dict[str, Path]:
    """
    a and b are hard links to one storage object, c has the same content
    but its own storage.
    """
    a = temp_dir / "a"
    a.write_bytes(b"X")
    b = temp_dir / "b"
    os.link(a, b)
    c = temp_dir / "c"
    c.write_bytes(b"X")
    return {"a": a, "b": b, "c": c}


@pytest.fixture
def non_utf8_files(temp_dir) -> Dict[str, str]:
    """
    A name that is not valid UTF-8 ("bad\\xff") sharing content with "good",
    plus an unrelated pair p1/p2 with ordinary names.
    Paths are returned as str, decoded the way os.walk decodes them.
    """
    if sys.platform != "linux":
        pytest.skip("Arbitrary byte file names need a Linux filesystem")

    root = os.fsencode(temp_dir)
    contents = {b"bad\xff": b"X", b"good": b"X", b"p1": b"Y", b"p2": b"Y"}
    files = {}
    for name, content in contents.items():
        path = os.path.join(root, name)
        with open(path, "wb") as f:
            f.write(content)
        files[os.fsdecode(name)] = os.fsdecode(path)
    return files
