#!/usr/bin/env python3
"""
dupsieve CLI: command line interface for finding and acting on duplicate files.
Lists sets of identical files by default; --link and --delete change the files on disk.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import io
import sys
import os
import signal
import time
import logging
from typing import List, Optional, NoReturn, Tuple

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from dupsieve import __version__
from dupsieve.core.models import ScanParams, ScanStats
from dupsieve.commands import DuplicateSearchCommand
from dupsieve.aliases import (
    DIGEST_CHOICES, DIGEST_HELP_TEXT, ACTION_HELP_TEXT, EPILOG_TEXT
)

# Largest value a process exit status can carry
MAX_EXIT_STATUS = 255
# Exit status after Ctrl+C, as for a shell job killed by SIGINT
INTERRUPTED_STATUS = 130


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.stop_requested: bool = False

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="dupsieve",
            description="dupsieve: find duplicate files and list, hard-link or delete them",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "paths",
            nargs="*",
            metavar="PATH",
            help="Files and directories to search for duplicates"
        )

        # Collection options
        parser.add_argument(
            "--recurse", "-r",
            action="store_true",
            help="Include files residing in subdirectories"
        )
        parser.add_argument(
            "--symlinks", "-s",
            action="store_true",
            help="Follow symlinks"
        )
        parser.add_argument(
            "--hardlinks", "-H",
            action="store_true",
            help="Normally, when two or more files point to the same disk area\n"
                 "they are treated as non-duplicates; this option changes this behavior"
        )
        parser.add_argument(
            "--noempty", "-n",
            action="store_true",
            help="Exclude zero-length files from consideration"
        )
        parser.add_argument(
            "--stdin", "-i",
            action="store_true",
            help="Read file names from stdin as well as processing any given as arguments"
        )
        parser.add_argument(
            "--digest",
            choices=DIGEST_CHOICES,
            default="xxh128",
            type=str,
            help=DIGEST_HELP_TEXT
        )
        parser.add_argument(
            "--jobs", "-j",
            default=1,
            type=int,
            metavar="N",
            help="Number of files hashed in parallel. Default: 1"
        )

        # Listing options
        parser.add_argument(
            "--sameline", "-1",
            action="store_true",
            help="List each set of matches on a single line"
        )
        parser.add_argument(
            "--omitfirst", "-f",
            action="store_true",
            help="Omit the first file in each set of matches"
        )
        parser.add_argument(
            "--size", "-S",
            action="store_true",
            help="Show size of duplicate files"
        )
        parser.add_argument(
            "--human-readable",
            action="store_true",
            dest="human_readable",
            help="With --size, show sizes as 1.50KB, 3.20MB, ..."
        )

        # Actions
        actions = parser.add_argument_group("actions", ACTION_HELP_TEXT)
        actions.add_argument(
            "--delete", "-d",
            action="store_true",
            help="For each set of duplicate files prompt for the files\n"
                 "to preserve and delete all others"
        )
        actions.add_argument(
            "--link", "-l",
            action="store_true",
            help="For each set of duplicate files make all the file names\n"
                 "hard links to the same disk storage"
        )
        actions.add_argument(
            "--trash",
            action="store_true",
            help="With --delete, move files to the system trash instead of removing them"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress warnings and progress messages"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress messages and statistics"
        )
        parser.add_argument(
            "--version", "-V",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.build_parser().parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any scanning."""
        if args.link and args.delete:
            self.error_exit("link and delete are mutually exclusive")

        if not args.paths and not args.stdin:
            self.error_exit("nothing to do - try 'dupsieve --help'")

        if args.trash and not args.delete:
            self.error_exit("--trash can only be used with --delete")

        if args.jobs < 1:
            self.error_exit("--jobs must be at least 1")

        if args.human_readable and not args.size:
            self.warning("--human-readable has no effect without --size")

        if args.delete and args.stdin:
            self.warning("file names are read from stdin, so delete prompts will see end of input")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            return ScanParams.from_flags(
                args.paths,
                link=args.link,
                delete=args.delete,
                quiet=args.quiet,
                recurse=args.recurse,
                follow_symlinks=args.symlinks,
                hardlinks_distinct=args.hardlinks,
                exclude_empty=args.noempty,
                same_line=args.sameline,
                omit_first=args.omitfirst,
                show_size=args.size,
                human_sizes=args.human_readable,
                read_stdin=args.stdin,
                verbose=args.verbose,
                use_trash=args.trash,
                jobs=args.jobs,
                algorithm=args.digest,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def configure_logging(self) -> None:
        """Warnings by default, phase notices with --verbose, errors only with --quiet."""
        if self.quiet:
            level = logging.ERROR
        elif self.verbose:
            level = logging.INFO
        else:
            level = logging.WARNING
        logging.getLogger("dupsieve").setLevel(level)

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """Check if operation should stop (set by the first Ctrl+C)."""
        return self.stop_requested

    def handle_interrupt(self, signum, frame) -> None:
        """First Ctrl+C asks the pipeline to stop after the current file, a second one aborts."""
        self.stop_requested = True
        signal.signal(signal.SIGINT, signal.default_int_handler)
        print("\n⚠️  Stopping... press Ctrl+C again to abort", file=sys.stderr)

    @staticmethod
    def configure_streams() -> None:
        """
        File names are bytes: names that are not valid UTF-8 reach Python as
        surrogate escapes and must go back out (and come in on stdin) unchanged.
        """
        for stream in (sys.stdout, sys.stdin):
            if isinstance(stream, io.TextIOWrapper):
                stream.reconfigure(errors="surrogateescape")

    def run_search(self, params: ScanParams) -> Tuple[int, ScanStats]:
        """Execute the duplicate search workflow."""
        command = DuplicateSearchCommand()
        previous_handler = signal.signal(signal.SIGINT, self.handle_interrupt)
        try:
            status, stats = command.execute(
                params,
                path_stream=sys.stdin,
                progress_callback=self.progress_callback if params.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except (OSError, RuntimeError) as e:
            self.error_exit(f"Duplicate search failed: {e}")
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        if params.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)

        return status, stats

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, args: Optional[List[str]] = None) -> int:
        """Main entry point. Returns the process exit status."""
        parsed = self.parse_args(args)
        self.verbose = parsed.verbose
        self.quiet = parsed.quiet
        self.configure_logging()
        self.configure_streams()

        self.validate_args(parsed)
        params = self.create_params(parsed)

        status, _ = self.run_search(params)
        if self.stop_requested:
            print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
            return INTERRUPTED_STATUS

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)

        return min(status, MAX_EXIT_STATUS)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(INTERRUPTED_STATUS)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
