"""File operations and duplicate set dispositions."""

from .file_service import FileService
from .disposition import (
    ListDisposition, LinkDisposition, DeleteDisposition, create_disposition)

__all__ = [
    "FileService",
    "ListDisposition",
    "LinkDisposition",
    "DeleteDisposition",
    "create_disposition",
]
