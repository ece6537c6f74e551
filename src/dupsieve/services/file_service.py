"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem mutations applied to duplicate files: hard-link replacement,
permanent removal and moving to the system trash.
All failures are raised as RuntimeError with a readable message.
"""
import os
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Filesystem operations used by the link and delete dispositions.
    """

    @staticmethod
    def same_storage(first: str, second: str) -> bool:
        """True if both paths currently name the same storage object."""
        try:
            return os.path.samefile(first, second)
        except OSError:
            return False

    @staticmethod
    def replace_with_link(master: str, duplicate: str):
        """
        Atomically replace duplicate with a hard link to master.

        A temporary link is created next to duplicate and renamed over it, so
        duplicate never disappears if linking fails. If both paths already share
        storage nothing is done.
        """
        if FileService.same_storage(master, duplicate):
            logger.debug(f"'{duplicate}' is already a hard link to '{master}'")
            return

        directory, name = os.path.split(duplicate)
        temp_path = os.path.join(directory, f".{name}.{os.getpid()}.dupsieve")

        try:
            os.link(master, temp_path)
        except OSError as e:
            raise RuntimeError(f"unable to link '{master}' to '{duplicate}' - {e.strerror or e}") from e

        try:
            os.replace(temp_path, duplicate)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.warning(f"unable to remove temporary link '{temp_path}'")
            raise RuntimeError(f"unable to replace '{duplicate}' - {e.strerror or e}") from e

    @staticmethod
    def delete_file(file_path: str):
        """Permanently removes a file."""
        try:
            os.unlink(file_path)
        except OSError as e:
            raise RuntimeError(f"unable to delete '{file_path}' - {e.strerror or e}") from e

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).absolute()

        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
