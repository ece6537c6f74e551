"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements full-content file hashing using pluggable streaming hash algorithms.

Files are read in CHUNK_SIZE blocks and fed into the accumulator, so memory use
does not grow with file size. Failures are reported and yield None; the caller
decides what to do with unhashable files.
"""

import hashlib
import logging
from typing import Dict, Optional

import xxhash

from dupsieve.core.models import FileRecord, CHUNK_SIZE
from dupsieve.core.interfaces import Hasher, HashAlgorithm, DigestAccumulator

logger = logging.getLogger(__name__)


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    name = "xxh128"

    def new(self) -> DigestAccumulator:
        return xxhash.xxh3_128()


class XXHash64AlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def new(self) -> DigestAccumulator:
        return xxhash.xxh64()


class MD5AlgorithmImpl(HashAlgorithm):
    name = "md5"

    def new(self) -> DigestAccumulator:
        return hashlib.md5()


ALGORITHMS: Dict[str, HashAlgorithm] = {
    "xxh128": XXHash128AlgorithmImpl(),
    "xxh64": XXHash64AlgorithmImpl(),
    "md5": MD5AlgorithmImpl(),
}


def get_algorithm(name: str) -> HashAlgorithm:
    """Look up a hash algorithm by its command line name."""
    try:
        return ALGORITHMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown digest algorithm: '{name}'. Valid options: {', '.join(ALGORITHMS)}"
        ) from None


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes the hex digest of a file's entire content.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None, chunk_size: int = CHUNK_SIZE):
        self.algorithm = algorithm or XXHash128AlgorithmImpl()
        self.chunk_size = chunk_size

    def compute_digest(self, record: FileRecord) -> Optional[str]:
        """
        Stream the file through the algorithm.

        Returns:
            Hex digest string, or None if the file could not be read
            or the digest came out empty.
        """
        accumulator = self.algorithm.new()
        try:
            with open(record.path, 'rb') as f:
                while True:
                    chunk = f.read(self.chunk_size)
                    if not chunk:
                        break
                    accumulator.update(chunk)
        except OSError as e:
            logger.warning(f"unable to open file '{record.path}' for reading - {e.strerror or e}")
            return None

        digest = accumulator.hexdigest()
        if not digest:
            logger.warning(f"digest calculation failed on file '{record.path}'")
            return None
        return digest
