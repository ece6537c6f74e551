"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/collector.py
Builds the candidate registry from command line paths and/or a stream of paths.
Features:
- stat or lstat chosen once, depending on whether symlinks are followed
- Regular files are registered once per path string, repeats only warn
- Directories are walked with os.walk when recursion is enabled
- Failures to stat a path or read a directory are counted, never fatal
"""

import os
import stat
import logging
from typing import Callable, Dict, FrozenSet, Iterable, Optional, TextIO, Tuple

from dupsieve.core.models import CandidateRegistry, FileRecord, ScanParams, Stage
from dupsieve.core.interfaces import FileCollector

logger = logging.getLogger(__name__)


class FileCollectorImpl(FileCollector):
    """
    Collects regular files into a CandidateRegistry.

    Attributes:
        params: Scan configuration (recurse, follow_symlinks, exclude_empty, quiet)
        registry: Registry receiving the FileRecords, keyed by the exact path string
    """

    # Progress throttling: update every N registered files
    PROGRESS_INTERVAL = 1000

    def __init__(self, params: ScanParams, registry: Optional[CandidateRegistry] = None):
        self.params = params
        self.registry = registry if registry is not None else CandidateRegistry()
        # Selected once: stat() reports on the link target, lstat() on the link itself
        self._stat = os.stat if params.follow_symlinks else os.lstat
        self._stopped_flag: Optional[Callable[[], bool]] = None
        self._progress_callback: Optional[Callable[[str, int, object], None]] = None

    def collect_all(
        self,
        paths: Iterable[str],
        stream: Optional[TextIO] = None,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> int:
        """
        Collect every path argument, then every path read from stream.
        Returns the number of hard failures (unstat-able paths, unreadable directories).
        """
        self._stopped_flag = stopped_flag
        self._progress_callback = progress_callback
        failures = 0

        try:
            for path in paths:
                if self._stopped():
                    logger.debug("Collection interrupted by user")
                    return failures
                failures += self.collect(path)

            if stream is not None:
                failures += self.collect_stream(stream)

            if progress_callback:
                progress_callback(Stage.COLLECT.value, len(self.registry), None)
        finally:
            self._stopped_flag = None
            self._progress_callback = None

        logger.debug(f"Collection completed. {len(self.registry)} candidate files, {failures} failures")
        return failures

    def collect_stream(self, stream: TextIO) -> int:
        """Read one path per line (trailing newline stripped) and collect each."""
        failures = 0
        for line in stream:
            if self._stopped():
                break
            path = line.rstrip("\n")
            if not path:
                continue
            failures += self.collect(path)
        return failures

    def collect(self, path: str) -> int:
        """
        Process a single path: register a regular file, walk a directory,
        ignore anything else.

        Returns:
            int: 1 if the path could not be stat'ed, the number of unreadable
                 directories for a walked tree, 0 otherwise
        """
        try:
            st = self._stat(path)
        except OSError as e:
            logger.warning(f"unable to stat '{path}' - {e.strerror or e}")
            return 1

        if stat.S_ISREG(st.st_mode):
            self._register(path, st)
            return 0

        if stat.S_ISDIR(st.st_mode):
            if not self.params.recurse:
                logger.warning(f"{path} is a directory - ignored")
                return 0
            return self._walk(path, st)

        # Symlinks (when not followed), devices, fifos, sockets
        logger.debug(f"Skipping non-regular file: {path}")
        return 0

    def _register(self, path: str, st: os.stat_result) -> None:
        if st.st_size == 0 and self.params.exclude_empty:
            logger.debug(f"Skipping zero-byte file: {path}")
            return

        if not self.registry.add(FileRecord.from_stat(path, st)):
            if not self.params.quiet:
                logger.warning(f"filename '{path}' already seen")
            return

        logger.debug(f"Accepted file: {path} ({st.st_size} bytes)")
        count = len(self.registry)
        if self._progress_callback and count % self.PROGRESS_INTERVAL == 0:
            self._progress_callback(Stage.COLLECT.value, count, None)

    def _walk(self, top: str, top_stat: os.stat_result) -> int:
        """Recursively collect everything below a directory."""
        failures = 0
        # Identities of the directories between top and each root still to be walked
        ancestors: Dict[str, FrozenSet[Tuple[int, int]]] = {
            top: frozenset({(top_stat.st_dev, top_stat.st_ino)})
        }

        def on_error(error: OSError) -> None:
            nonlocal failures
            logger.warning(f"unable to read directory '{error.filename}' - {error.strerror or error}")
            failures += 1

        for root, dirs, files in os.walk(top, onerror=on_error, followlinks=self.params.follow_symlinks):
            if self._stopped():
                logger.debug("Walk interrupted by user")
                break

            # Pre-filter subdirectories BEFORE os.walk enters them
            if self.params.follow_symlinks:
                chain = ancestors.pop(root, frozenset())
                dirs[:] = [d for d in dirs if self._prefilter_dir(os.path.join(root, d), chain, ancestors)]

            for name in files:
                failures += self.collect(os.path.join(root, name))

        return failures

    @staticmethod
    def _prefilter_dir(
        path: str,
        chain: FrozenSet[Tuple[int, int]],
        ancestors: Dict[str, FrozenSet[Tuple[int, int]]]
    ) -> bool:
        """Skip a directory that is one of its own ancestors (symlink loop)."""
        try:
            st = os.stat(path)
        except OSError:
            # Let os.walk report it through onerror
            return True

        key = (st.st_dev, st.st_ino)
        if key in chain:
            logger.warning(f"directory '{path}' leads back to one of its parents - ignored")
            return False
        ancestors[path] = chain | {key}
        return True

    def _stopped(self) -> bool:
        return bool(self._stopped_flag and self._stopped_flag())
