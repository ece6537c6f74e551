"""
Unified command orchestrator for the duplicate search.
The CLI is a thin layer over it.
"""
import logging
import time
from typing import Callable, Optional, TextIO, Tuple

from dupsieve.core.collector import FileCollectorImpl
from dupsieve.core.engine import DispositionEngine
from dupsieve.core.grouper import DigestGrouperImpl
from dupsieve.core.hasher import HasherImpl, get_algorithm
from dupsieve.core.interfaces import Disposition
from dupsieve.core.models import CandidateRegistry, DigestTable, ScanParams, ScanStats, Stage
from dupsieve.services.disposition import create_disposition

logger = logging.getLogger(__name__)


class DuplicateSearchCommand:
    """
    Orchestrates the entire workflow, strictly in sequence:
    1. Collect candidate files from paths (and optionally a path stream)
    2. Group them by content digest
    3. Verify each bucket byte by byte and apply the disposition

    Usage:
        params = ScanParams(paths=["/data"], recurse=True)
        command = DuplicateSearchCommand()
        status, stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self):
        self.registry: Optional[CandidateRegistry] = None
        self.table: Optional[DigestTable] = None

    def execute(
            self,
            params: ScanParams,
            path_stream: Optional[TextIO] = None,
            disposition: Optional[Disposition] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[int, ScanStats]:
        """
        Run the duplicate search with given parameters.

        Args:
            params: Validated scan parameters
            path_stream: Line-oriented source of extra paths, used when params.read_stdin is set
            disposition: Action for each duplicate set; built from params when omitted
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)

        Returns:
            Tuple of (number of collection failures, statistics)
        """
        stats = ScanStats()
        total_start_time = time.time()

        # Phase one - build the file list
        logger.info("building file list")
        start_time = time.time()
        collector = FileCollectorImpl(params)
        failures = collector.collect_all(
            params.paths,
            stream=path_stream if params.read_stdin else None,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        self.registry = collector.registry
        stats.failures = failures
        stats.files = len(self.registry)
        stats.update_stage("collect", 0, stats.files, time.time() - start_time)

        if not self.registry:
            logger.info("no candidate files found - nothing to compare")
            stats.total_time = time.time() - total_start_time
            return failures, stats

        if self._stopped(stopped_flag, Stage.COLLECT):
            stats.total_time = time.time() - total_start_time
            return failures, stats

        # Phase two - group files by content digest
        logger.info("calculating digests")
        start_time = time.time()
        grouper = DigestGrouperImpl(HasherImpl(get_algorithm(params.algorithm)), jobs=params.jobs)
        self.table = grouper.group(
            self.registry,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        stats.buckets = len(self.table)
        stats.update_stage(
            "digest",
            len(self.table.duplicate_buckets()),
            sum(b.member_count for b in self.table.buckets()),
            time.time() - start_time
        )

        if self._stopped(stopped_flag, Stage.DIGEST):
            stats.total_time = time.time() - total_start_time
            return failures, stats

        # Phase three - check for exact matches and carry out actions
        logger.info("performing required actions")
        engine = DispositionEngine(hardlinks_distinct=params.hardlinks_distinct)
        engine.run(
            self.table,
            disposition or create_disposition(params),
            stats=stats,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

        stats.total_time = time.time() - total_start_time
        return failures, stats

    @staticmethod
    def _stopped(stopped_flag: Optional[Callable[[], bool]], stage: Stage) -> bool:
        if stopped_flag and stopped_flag():
            logger.info(f"cancelled after stage: {stage.value}")
            return True
        return False
