"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure ordering and hard-link filtering logic for digest bucket members.
"""
from typing import List, Set, Tuple

from dupsieve.core.models import FileRecord


class Sorter:
    """
    Orders bucket members before verification. The first file becomes the master.
    Sorting priority (applied lexicographically):
    1. Files with more hard links first, so the survivor is the one that already
       shares its storage most widely and linking needs the fewest operations
    2. Path, ascending, to break ties deterministically
    """

    @staticmethod
    def sort_key(record: FileRecord) -> Tuple[int, str]:
        return -record.hard_links, record.path

    @staticmethod
    def sort_members(members: List[FileRecord]) -> List[FileRecord]:
        """Returns a new sorted list; the bucket itself is left untouched."""
        return sorted(members, key=Sorter.sort_key)


def filter_links(members: List[FileRecord]) -> List[FileRecord]:
    """
    Keep only one path per storage object (device, inode).

    The first member is always kept; each later member is kept only if no kept
    member shares its storage. Two names for one inode are the same file, not
    duplicates, so they must never be linked or deleted against each other.
    Applying it to an already filtered list returns an equal list.
    """
    kept: List[FileRecord] = []
    seen: Set[Tuple[int, int]] = set()
    for record in members:
        if record.storage_id in seen:
            continue
        seen.add(record.storage_id)
        kept.append(record)
    return kept
