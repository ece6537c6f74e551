"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate search.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm / DigestAccumulator: Pluggable streaming hash functions (xxHash, MD5).
- Hasher: Interface for computing the content digest of one file.
- FileCollector: Interface for building the candidate registry from input paths.
- DigestGrouper: Interface for bucketing candidates by content digest.
- Disposition: Interface for the action applied to each verified duplicate set.
"""

from typing import Protocol, Iterable, Optional, Callable, TextIO
from dupsieve.core.models import (
    FileRecord,
    CandidateRegistry,
    DigestTable,
    DuplicateSet,
)


# ===== Interfaces =====

class DigestAccumulator(Protocol):
    """Incremental hash state, as returned by hashlib.new() or xxhash.xxh*()."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic streaming hash algorithms.

    Allows plugging in different hashing functions like xxHash or MD5
    without affecting the rest of the duplicate search.
    """
    name: str

    def new(self) -> DigestAccumulator:
        """Returns a fresh accumulator."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_digest(self, record: FileRecord) -> Optional[str]: ...


class FileCollector(Protocol):
    """
    Interface for collecting candidate files into a registry.

    Methods:
        collect: Adds one path (recursing if configured) and returns the failure count.
        collect_stream: Same for every path read from a line-oriented stream.
    """
    registry: CandidateRegistry

    def collect(self, path: str) -> int:
        ...

    def collect_stream(self, stream: TextIO) -> int:
        ...

    def collect_all(
        self,
        paths: Iterable[str],
        stream: Optional[TextIO] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> int:
        """
        Collect every path argument, then every path from stream if given.

        Returns:
            Number of paths that could not be stat'ed or directories that could not be read.
        """
        ...


class DigestGrouper(Protocol):
    """
    Interface for grouping candidate files by full content digest.
    """
    def group(
        self,
        registry: CandidateRegistry,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DigestTable:
        ...


class Disposition(Protocol):
    """
    Interface for the action applied to a verified duplicate set (list, link or delete).
    """
    def apply(self, duplicate_set: DuplicateSet) -> None:
        ...
