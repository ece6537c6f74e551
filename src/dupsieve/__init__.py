"""
dupsieve: find files with identical content and list, hard-link or delete them.

Core features:
- Candidate collection from paths, directory trees or a stream of file names
- Content digest bucketing (xxHash3 128-bit by default) with byte-exact verification
- Hard-link aware: several names of one file are never treated as duplicates
- Actions: list, hard-link consolidation, interactive delete (optionally to system trash via send2trash)
"""

from pathlib import Path

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupsieve")
except Exception:
    import tomllib

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from dupsieve.commands import DuplicateSearchCommand
from dupsieve.core import (
    ScanParams, ScanStats, DispositionAction, FileRecord, CandidateRegistry,
    DigestTable, DigestBucket, DuplicateSet)
from dupsieve.utils.convert_utils import ConvertUtils
from dupsieve.services import FileService, create_disposition

__all__ = [
    "DuplicateSearchCommand",
    "ScanParams",
    "ScanStats",
    "DispositionAction",
    "FileRecord",
    "CandidateRegistry",
    "DigestTable",
    "DigestBucket",
    "DuplicateSet",
    "ConvertUtils",
    "FileService",
    "create_disposition",
    "__version__",
]
