"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for candidate collection, digest grouping and duplicate disposition.
"""

import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from dupsieve.utils.convert_utils import ConvertUtils

# Amount of data read at a time when hashing or comparing files
CHUNK_SIZE = 8192


# =============================
# Enums
# =============================

class DispositionAction(Enum):
    """
    What to do with each verified set of duplicate files.
    Exactly one action is active per run.
    """
    LIST = "list"
    LINK = "link"
    DELETE = "delete"

    def __repr__(self) -> str:
        return self.value


class Stage(str, Enum):
    COLLECT = "Building file list"
    DIGEST = "Calculating digests"
    DISPOSE = "Performing actions"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    A filesystem entry known to be a regular file at scan time.
    Immutable: records are owned by the CandidateRegistry and only referenced elsewhere.
    """
    path: str
    size: int  # in bytes
    hard_links: int = 1
    mode: int = stat.S_IFREG | 0o644
    device: int = 0
    inode: int = 0

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> "FileRecord":
        """Build a record from the result of os.stat()/os.lstat()."""
        return cls(
            path=path,
            size=st.st_size,
            hard_links=st.st_nlink,
            mode=st.st_mode,
            device=st.st_dev,
            inode=st.st_ino,
        )

    @property
    def storage_id(self) -> Tuple[int, int]:
        """(device, inode) pair identifying the on-disk storage object."""
        return self.device, self.inode

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}, links={self.hard_links}>"


class CandidateRegistry:
    """
    Ordered mapping from path string to FileRecord.
    Each path is inserted at most once; repeated insertions are rejected, never overwritten.
    Iteration is in lexicographic path order so later phases are reproducible.
    """

    def __init__(self):
        self._records: Dict[str, FileRecord] = {}

    def add(self, record: FileRecord) -> bool:
        """Insert a record. Returns False if the path is already registered."""
        if record.path in self._records:
            return False
        self._records[record.path] = record
        return True

    def get(self, path: str) -> Optional[FileRecord]:
        return self._records.get(path)

    def paths(self) -> List[str]:
        return sorted(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FileRecord]:
        for path in self.paths():
            yield self._records[path]

    def __repr__(self):
        return f"<CandidateRegistry files={len(self._records)}>"


@dataclass
class DigestBucket:
    """All candidate files whose content hashed to the same digest."""
    digest: str
    members: List[FileRecord] = field(default_factory=list)

    @property
    def member_count(self) -> int:
        return len(self.members)

    def is_duplicate(self) -> bool:
        """True if this bucket contains at least two files."""
        return self.member_count >= 2

    def __repr__(self):
        return f"<DigestBucket digest={self.digest}, count={len(self.members)}>"


class DigestTable:
    """
    Mapping from digest string to DigestBucket.
    Buckets keep the order in which their digest was first seen.
    """

    def __init__(self):
        self._buckets: Dict[str, DigestBucket] = {}

    def add(self, digest: str, record: FileRecord) -> DigestBucket:
        """Append a record to the bucket for digest, creating the bucket on first occurrence."""
        bucket = self._buckets.get(digest)
        if bucket is None:
            bucket = DigestBucket(digest=digest)
            self._buckets[digest] = bucket
        bucket.members.append(record)
        return bucket

    def get(self, digest: str) -> Optional[DigestBucket]:
        return self._buckets.get(digest)

    def buckets(self) -> List[DigestBucket]:
        return list(self._buckets.values())

    def duplicate_buckets(self) -> List[DigestBucket]:
        """Buckets with more than one member; single-member buckets are never acted upon."""
        return [b for b in self._buckets.values() if b.is_duplicate()]

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self):
        return f"<DigestTable buckets={len(self._buckets)}>"


@dataclass
class DuplicateSet:
    """
    Verified output of one equivalence pass: files confirmed byte-identical to master.
    Consumed immediately by a disposition.
    """
    digest: str
    master: FileRecord
    duplicates: List[FileRecord]

    @property
    def reclaimable_bytes(self) -> int:
        """Bytes freed if every duplicate were removed or linked to master."""
        return sum(f.size for f in self.duplicates)

    @property
    def files(self) -> List[FileRecord]:
        return [self.master] + list(self.duplicates)

    def __repr__(self):
        return f"<DuplicateSet master={self.master.path}, duplicates={len(self.duplicates)}>"


@dataclass
class ScanStats:
    """
    Statistics collected during a run.
    """
    total_time: float = 0.0
    stage_stats: Dict[str, Dict[str, float]] = field(default_factory=dict)
    files: int = 0
    buckets: int = 0
    duplicate_sets: int = 0
    duplicate_files: int = 0
    reclaimable_bytes: int = 0
    failures: int = 0

    def update_stage(
            self,
            stage_name: str,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage_name not in self.stage_stats:
            self.stage_stats[stage_name] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage_name]["groups"] += groups_found
        self.stage_stats[stage_name]["files"] += files_processed
        self.stage_stats[stage_name]["time"] += duration

    def record_duplicate_set(self, duplicate_set: DuplicateSet) -> None:
        self.duplicate_sets += 1
        self.duplicate_files += len(duplicate_set.duplicates)
        self.reclaimable_bytes += duplicate_set.reclaimable_bytes

    def print_summary(self) -> str:
        labels = {
            "collect": "📁 File list",
            "digest": "🔍 Digest buckets",
            "dispose": "📄 Duplicate sets",
        }

        lines = [
            "📊 Duplicate Search Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage, data in self.stage_stats.items():
            label = labels.get(stage.lower(), stage.title())
            lines.append(f"{label}: {int(data['groups'])} / {int(data['files'])} / {data['time']:.3f}s")

        lines.append(
            f"\nDuplicates: {self.duplicate_files} files in {self.duplicate_sets} sets, "
            f"{ConvertUtils.bytes_to_human(self.reclaimable_bytes)} reclaimable"
        )
        if self.failures:
            lines.append(f"Inaccessible inputs: {self.failures}")

        return "\n".join(lines)


"""
DTO for scan parameters with built-in validation.
Built once from the command line and passed to every component.
"""

@dataclass
class ScanParams:
    """Parameters for a duplicate search with validation."""
    paths: List[str] = field(default_factory=list)
    quiet: bool = False
    recurse: bool = False
    follow_symlinks: bool = False
    hardlinks_distinct: bool = False
    exclude_empty: bool = False
    same_line: bool = False
    omit_first: bool = False
    show_size: bool = False
    human_sizes: bool = False
    action: DispositionAction = DispositionAction.LIST
    read_stdin: bool = False
    verbose: bool = False
    use_trash: bool = False
    jobs: int = 1
    algorithm: str = "xxh128"

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.paths and not self.read_stdin:
            raise ValueError("nothing to do - no paths given and not reading from stdin")

        if self.use_trash and self.action != DispositionAction.DELETE:
            raise ValueError("trash can only be used with the delete action")

        if self.jobs < 1:
            raise ValueError("Number of jobs must be at least 1")

        # Imported here: the hasher module depends on these models
        from dupsieve.core.hasher import get_algorithm
        get_algorithm(self.algorithm)

    @staticmethod
    def from_flags(
            paths: List[str],
            link: bool = False,
            delete: bool = False,
            **kwargs
    ) -> 'ScanParams':
        """
        Factory method to create params from independent link/delete switches.
        Selecting both is a configuration error.
        """
        if link and delete:
            raise ValueError("link and delete are mutually exclusive")

        if link:
            action = DispositionAction.LINK
        elif delete:
            action = DispositionAction.DELETE
        else:
            action = DispositionAction.LIST

        return ScanParams(paths=list(paths), action=action, **kwargs)
