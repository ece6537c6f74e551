"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/disposition.py
The three actions that can be applied to a verified duplicate set.

DispositionAction.LIST   -> ListDisposition   : print the set
DispositionAction.LINK   -> LinkDisposition   : make every duplicate a hard link to master
DispositionAction.DELETE -> DeleteDisposition : let the user pick files to delete

create_disposition() is the only place that maps the configured action to a class.
"""
import sys
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, TextIO

from dupsieve.core.interfaces import Disposition
from dupsieve.core.models import DispositionAction, DuplicateSet, FileRecord, ScanParams
from dupsieve.services.file_service import FileService
from dupsieve.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class ListDisposition(Disposition):
    """Prints each duplicate set, one file per line or all on one line."""

    def __init__(
        self,
        same_line: bool = False,
        omit_first: bool = False,
        show_size: bool = False,
        human_sizes: bool = False,
        out: Optional[TextIO] = None
    ):
        self.same_line = same_line
        self.omit_first = omit_first
        self.show_size = show_size
        self.human_sizes = human_sizes
        self.out = out or sys.stdout

    def format_entry(self, record: FileRecord) -> str:
        if self.show_size:
            return f"{record.path} ({ConvertUtils.format_size(record.size, self.human_sizes)})"
        return record.path

    def apply(self, duplicate_set: DuplicateSet) -> None:
        files = duplicate_set.duplicates if self.omit_first else duplicate_set.files
        entries = [self.format_entry(f) for f in files]

        if self.same_line:
            print(" ".join(entries), file=self.out)
        else:
            for entry in entries:
                print(entry, file=self.out)
            # Blank line between sets
            print(file=self.out)


class LinkDisposition(Disposition):
    """Replaces every confirmed duplicate with a hard link to the master."""

    def __init__(self, file_service: Optional[FileService] = None):
        self.file_service = file_service or FileService()
        self.linked_count = 0
        self.failed: List[str] = []

    def apply(self, duplicate_set: DuplicateSet) -> None:
        master = duplicate_set.master
        for duplicate in duplicate_set.duplicates:
            try:
                self.file_service.replace_with_link(master.path, duplicate.path)
                self.linked_count += 1
                logger.info(f"linked '{duplicate.path}' to '{master.path}'")
            except RuntimeError as e:
                self.failed.append(duplicate.path)
                logger.warning(str(e))
                continue  # Continue with next file


# =============================
# Interactive delete
# =============================

class CommandKind(Enum):
    TOGGLE = "toggle"
    GO = "go"
    EOF = "eof"
    INVALID = "invalid"


@dataclass
class DeleteCommand:
    kind: CommandKind
    index: int = 0

    @staticmethod
    def parse(line: str) -> "DeleteCommand":
        """
        Parse one line of user input. An empty string (not even a newline) is end of input.
        """
        if line == "":
            return DeleteCommand(CommandKind.EOF)
        text = line.strip()
        if text.lower().startswith("go"):
            return DeleteCommand(CommandKind.GO)
        try:
            number = int(text)
        except ValueError:
            return DeleteCommand(CommandKind.INVALID)
        if number <= 0:
            return DeleteCommand(CommandKind.INVALID)
        return DeleteCommand(CommandKind.TOGGLE, number)


@dataclass
class DeleteEntry:
    record: FileRecord
    keep: bool


class DeleteDisposition(Disposition):
    """
    Interactive disposition menu. The master starts marked keep, every duplicate
    starts marked delete. Typing a number toggles that entry, typing 'go' removes
    every entry still marked delete, end of input removes nothing.
    """

    PROMPT = "\n> "

    def __init__(
        self,
        use_trash: bool = False,
        file_service: Optional[FileService] = None,
        stdin: Optional[TextIO] = None,
        out: Optional[TextIO] = None
    ):
        self.use_trash = use_trash
        self.file_service = file_service or FileService()
        self.stdin = stdin or sys.stdin
        self.out = out or sys.stdout
        self.deleted: List[str] = []
        self.failed: List[str] = []

    def print_menu(self, digest: str, entries: List[DeleteEntry]) -> None:
        print(f"\nDisposition of files with digest {digest}\n", file=self.out)
        for i, entry in enumerate(entries, 1):
            mark = "*" if entry.keep else " "
            print(f"{i:5d} {mark} {entry.record.path} ({entry.record.hard_links} links)", file=self.out)
        print(
            "\nFiles marked (*) will be kept - the rest deleted\n"
            "To toggle a file's status type its number\n"
            "Type 'go' to go ahead with the delete",
            file=self.out
        )

    def apply(self, duplicate_set: DuplicateSet) -> None:
        entries = [DeleteEntry(duplicate_set.master, keep=True)]
        entries += [DeleteEntry(f, keep=False) for f in duplicate_set.duplicates]

        show_menu = True
        while True:
            if show_menu:
                self.print_menu(duplicate_set.digest, entries)
                show_menu = False

            self.out.write(self.PROMPT)
            self.out.flush()
            command = DeleteCommand.parse(self.stdin.readline())

            if command.kind == CommandKind.EOF:
                print("*** EOF *** no action taken", file=self.out)
                return

            if command.kind == CommandKind.GO:
                if not any(entry.keep for entry in entries):
                    print("at least one file must be kept - toggle a file first", file=self.out)
                    continue
                self._delete_marked(entries)
                return

            if command.kind == CommandKind.TOGGLE:
                if command.index > len(entries):
                    print(f"no file number {command.index}", file=self.out)
                    continue
                entry = entries[command.index - 1]
                entry.keep = not entry.keep
                show_menu = True
                continue

            print("invalid input - please type a number or 'go'", file=self.out)

    def _delete_marked(self, entries: List[DeleteEntry]) -> None:
        for entry in entries:
            if entry.keep:
                continue
            path = entry.record.path
            try:
                if self.use_trash:
                    self.file_service.move_to_trash(path)
                    print(f"{path} moved to trash", file=self.out)
                else:
                    self.file_service.delete_file(path)
                    print(f"{path} deleted", file=self.out)
                self.deleted.append(path)
            except RuntimeError as e:
                self.failed.append(path)
                logger.warning(str(e))
                continue  # Continue with next file


def create_disposition(
    params: ScanParams,
    file_service: Optional[FileService] = None,
    stdin: Optional[TextIO] = None,
    out: Optional[TextIO] = None
) -> Disposition:
    """Build the disposition for the configured action."""
    if params.action == DispositionAction.LINK:
        return LinkDisposition(file_service=file_service)
    if params.action == DispositionAction.DELETE:
        return DeleteDisposition(
            use_trash=params.use_trash,
            file_service=file_service,
            stdin=stdin,
            out=out
        )
    return ListDisposition(
        same_line=params.same_line,
        omit_first=params.omit_first,
        show_size=params.show_size,
        human_sizes=params.human_sizes,
        out=out
    )
