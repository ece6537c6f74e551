"""
Core duplicate search engine: collector, hasher, grouper, verifier and disposition engine.

This package contains the performance-critical foundation of dupsieve:
- FileCollectorImpl: path/stream collection into a unique-per-path registry
- HasherImpl + XXHash128AlgorithmImpl: streaming full-content digests
- DigestGrouperImpl: digest buckets, optionally hashed on a thread pool
- Sorter / filter_links: master selection and hard-link collapsing
- compare_exact: byte-by-byte verification
- DispositionEngine: per-bucket master/duplicate partitioning
- Models: FileRecord, CandidateRegistry, DigestTable, DuplicateSet and configuration objects
"""

from .models import (
    FileRecord, CandidateRegistry, DigestBucket, DigestTable, DuplicateSet,
    DispositionAction, ScanParams, ScanStats, Stage, CHUNK_SIZE)
from .collector import FileCollectorImpl
from .hasher import (
    HasherImpl, XXHash128AlgorithmImpl, XXHash64AlgorithmImpl, MD5AlgorithmImpl, get_algorithm)
from .grouper import DigestGrouperImpl
from .sorter import Sorter, filter_links
from .verifier import compare_exact
from .engine import DispositionEngine, partition

__all__ = [
    "FileRecord",
    "CandidateRegistry",
    "DigestBucket",
    "DigestTable",
    "DuplicateSet",
    "DispositionAction",
    "ScanParams",
    "ScanStats",
    "Stage",
    "CHUNK_SIZE",
    "FileCollectorImpl",
    "HasherImpl",
    "XXHash128AlgorithmImpl",
    "XXHash64AlgorithmImpl",
    "MD5AlgorithmImpl",
    "get_algorithm",
    "DigestGrouperImpl",
    "Sorter",
    "filter_links",
    "compare_exact",
    "DispositionEngine",
    "partition",
]
