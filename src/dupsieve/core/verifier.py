"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/verifier.py
Byte-by-byte comparison of two files. Equal digests are necessary but not
sufficient evidence of equal content; this rules out digest collisions.
"""

import logging

from dupsieve.core.models import FileRecord, CHUNK_SIZE

logger = logging.getLogger(__name__)


def compare_exact(first: FileRecord, second: FileRecord, chunk_size: int = CHUNK_SIZE) -> bool:
    """
    Compare two files in lockstep chunks.

    Returns:
        True only if both files reach EOF together with no differing chunk.
        False on the first mismatch, or if either file cannot be opened or read.
    """
    try:
        with open(first.path, 'rb') as f1, open(second.path, 'rb') as f2:
            while True:
                chunk1 = f1.read(chunk_size)
                chunk2 = f2.read(chunk_size)
                if chunk1 != chunk2:
                    return False
                if not chunk1:
                    return True
    except OSError as e:
        logger.error(f"unable to compare '{first.path}' with '{second.path}' - {e}")
        return False
