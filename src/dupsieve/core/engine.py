"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/engine.py
Per-bucket verification and disposition.

For every digest bucket with two or more members:
  1. Sort members (most hard links first, then by path)
  2. Collapse hard-linked members unless they are treated as distinct
  3. Pop the head as master, split the rest into confirmed/rejected by exact comparison
  4. Hand (master, confirmed) to the disposition, then repeat with the rejected files

Files that share a digest but not content therefore end up in separate sets,
and every member of a bucket is compared against every later master until
the working list is exhausted.
"""

import logging
import time
from typing import Callable, Iterator, List, Optional, Tuple

from dupsieve.core.interfaces import Disposition
from dupsieve.core.models import DigestBucket, DigestTable, DuplicateSet, FileRecord, ScanStats, Stage
from dupsieve.core.sorter import Sorter, filter_links
from dupsieve.core.verifier import compare_exact

logger = logging.getLogger(__name__)

Comparator = Callable[[FileRecord, FileRecord], bool]


def partition(
    master: FileRecord,
    candidates: List[FileRecord],
    comparator: Comparator = compare_exact
) -> Tuple[List[FileRecord], List[FileRecord]]:
    """
    Single pass over candidates: those byte-identical to master are confirmed,
    everything else is rejected. Relative order is preserved in both lists.
    """
    confirmed: List[FileRecord] = []
    rejected: List[FileRecord] = []
    for candidate in candidates:
        if comparator(master, candidate):
            confirmed.append(candidate)
        else:
            rejected.append(candidate)
    return confirmed, rejected


class DispositionEngine:
    """
    Turns digest buckets into verified duplicate sets and applies one disposition to each.
    """

    def __init__(self, hardlinks_distinct: bool = False, comparator: Optional[Comparator] = None):
        self.hardlinks_distinct = hardlinks_distinct
        self.comparator = comparator or compare_exact

    def working_list(self, bucket: DigestBucket) -> List[FileRecord]:
        """Sorted bucket members, with hard links collapsed unless treated as distinct."""
        members = Sorter.sort_members(bucket.members)
        if not self.hardlinks_distinct:
            members = filter_links(members)
        return members

    def iter_bucket(self, bucket: DigestBucket) -> Iterator[DuplicateSet]:
        """Yield every verified duplicate set found in one bucket."""
        if not bucket.is_duplicate():
            return

        remaining = self.working_list(bucket)
        while remaining:
            master, candidates = remaining[0], remaining[1:]
            confirmed, rejected = partition(master, candidates, self.comparator)
            if confirmed:
                yield DuplicateSet(digest=bucket.digest, master=master, duplicates=confirmed)
            elif candidates:
                logger.debug(f"No exact match for {master.path} in bucket {bucket.digest}")
            remaining = rejected

    def iter_duplicate_sets(
        self,
        table: DigestTable,
        stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Iterator[DuplicateSet]:
        """Yield duplicate sets lazily, bucket by bucket, in table order."""
        for bucket in table.duplicate_buckets():
            if stopped_flag and stopped_flag():
                logger.debug("Verification interrupted by user")
                return
            yield from self.iter_bucket(bucket)

    def run(
        self,
        table: DigestTable,
        disposition: Disposition,
        stats: Optional[ScanStats] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> ScanStats:
        """
        Verify every bucket and apply the disposition to each duplicate set as soon as it is found.
        """
        stats = stats if stats is not None else ScanStats()
        start_time = time.time()
        files_in_sets = 0
        sets_found = 0

        for duplicate_set in self.iter_duplicate_sets(table, stopped_flag=stopped_flag):
            disposition.apply(duplicate_set)
            stats.record_duplicate_set(duplicate_set)
            sets_found += 1
            files_in_sets += len(duplicate_set.files)
            if progress_callback:
                progress_callback(Stage.DISPOSE.value, sets_found, None)

        stats.update_stage(
            stage_name="dispose",
            groups_found=sets_found,
            files_processed=files_in_sets,
            duration=time.time() - start_time
        )
        return stats
