"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups candidate files into digest buckets using an injected Hasher.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional, Tuple

from dupsieve.core.interfaces import DigestGrouper, Hasher
from dupsieve.core.models import CandidateRegistry, DigestTable, FileRecord, Stage
from dupsieve.core.hasher import HasherImpl

logger = logging.getLogger(__name__)


class DigestGrouperImpl(DigestGrouper):
    """
    A concrete implementation of DigestGrouper.
    Hashing may run on a bounded thread pool; results are always merged in
    registry order, so the table is the same as for a sequential run.
    """

    # Progress throttling: update every N hashed files
    PROGRESS_INTERVAL = 100

    def __init__(self, hasher: Optional[Hasher] = None, jobs: int = 1):
        if jobs < 1:
            raise ValueError("Number of jobs must be at least 1")
        self.hasher = hasher or HasherImpl()
        self.jobs = jobs

    def group(
        self,
        registry: CandidateRegistry,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DigestTable:
        """
        Hash every registered file and append it to the bucket for its digest.
        Unreadable files are left out of the table entirely.
        """
        table = DigestTable()
        records = list(registry)
        total_files = len(records)
        processed_files = 0
        skipped_files = 0

        for record, digest in self._digests(records):
            if stopped_flag and stopped_flag():
                logger.debug("Digest calculation interrupted by user")
                break

            if digest is None:
                skipped_files += 1
            else:
                table.add(digest, record)

            processed_files += 1
            if progress_callback and (processed_files % self.PROGRESS_INTERVAL == 0
                                      or processed_files == total_files):
                progress_callback(Stage.DIGEST.value, processed_files, total_files)

        if skipped_files > 0:
            logger.info(f"Skipped {skipped_files} files that could not be hashed")

        return table

    def _digests(self, records: List[FileRecord]) -> Iterator[Tuple[FileRecord, Optional[str]]]:
        """Yield (record, digest) pairs in input order."""
        if self.jobs == 1 or len(records) < 2:
            for record in records:
                yield record, self.hasher.compute_digest(record)
            return

        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            # Executor.map preserves input order regardless of completion order
            yield from zip(records, executor.map(self.hasher.compute_digest, records))
