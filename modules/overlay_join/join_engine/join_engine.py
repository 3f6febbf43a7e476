"""Overlay Join Engine

Computes every block/submission intersection whose area reaches the configured
share of the block's area and groups the accepted overlap regions by block
identifier.

Per submission the engine narrows candidates in three steps, cheapest first:
bounding box overlap (the index query), the exact overlap test, then overlay
construction followed by the area-ratio filter. Geometry failures skip the
affected pair and never abort a run.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
import logging
import threading

from geojoin.exceptions import GeometryOperationError, GeoJoinValidationError
from geojoin.interfaces import GeometryCapability
from ..aggregation import ResultTable
from ..models import Block, Submission, IntersectionResult
from ..spatial_index import BlockIndex
from .join_models import (
    JoinConfig, JoinRunResult, JoinStatistics, PairOutcome, SubmissionJoinResult
)

logger = logging.getLogger(__name__)


class OverlayJoinEngine:
    """Spatial join of submissions against an index of blocks.

    The engine is backend-agnostic: every geometric question goes through the
    injected GeometryCapability. Runs are independent; nothing is kept on the
    engine between calls to ``run``.
    """

    def __init__(self, capability: GeometryCapability, config: Optional[JoinConfig] = None):
        """Initialize the join engine.

        Args:
            capability: Geometry capability answering bounding box, overlap,
                overlay and area questions
            config: Join settings; defaults to JoinConfig()
        """
        self.capability = capability
        self.config = config or JoinConfig()

        logger.debug(f"OverlayJoinEngine configured: node_capacity={self.config.index_node_capacity}, "
                     f"threshold={self.config.area_ratio_threshold}, workers={self.config.max_workers}")

    def run(self, blocks: Iterable[Block], submissions: Iterable[Submission],
            cancel_event: Optional[threading.Event] = None) -> JoinRunResult:
        """Join all submissions against all blocks.

        Args:
            blocks: Block set; identifiers must be unique
            submissions: Submission set
            cancel_event: Optional event checked between submissions; once set,
                the remaining submissions are skipped and the result is
                flagged as cancelled

        Returns:
            JoinRunResult holding the result table and run statistics

        Raises:
            GeoJoinValidationError: If two blocks share an identifier
        """
        start_time = datetime.now()
        blocks = list(blocks)
        submissions = list(submissions)

        self._validate_unique_identifiers(blocks)
        logger.info(f"Starting overlay join: {len(blocks)} blocks, {len(submissions)} submissions")

        index = self.build_index(blocks)
        statistics = JoinStatistics(invalid_blocks=len(index.skipped_blocks))
        table = ResultTable()

        if self.config.max_workers > 1 and len(submissions) > 1:
            cancelled = self._run_concurrent(index, submissions, table, statistics, cancel_event)
        else:
            cancelled = self._run_sequential(index, submissions, table, statistics, cancel_event)

        result = JoinRunResult(
            block_count=len(blocks),
            submission_count=len(submissions),
            results=table,
            statistics=statistics,
            cancelled=cancelled,
            processing_duration=(datetime.now() - start_time).total_seconds()
        )

        logger.info(result.get_run_summary())
        if statistics.get_skipped_failures():
            logger.warning(f"{statistics.overlap_test_errors} overlap tests and "
                           f"{statistics.overlay_failures} overlays failed and were skipped")
        return result

    def build_index(self, blocks: Iterable[Block]) -> BlockIndex:
        """Bulk-load a block index with the configured fan-out."""
        return BlockIndex(self.capability, node_capacity=self.config.index_node_capacity).build(blocks)

    def join_submission(self, index: BlockIndex, submission: Submission) -> SubmissionJoinResult:
        """Evaluate one submission against its candidate blocks.

        Does not touch any result table, so it can run on worker threads.

        Args:
            index: Built block index
            submission: Submission to evaluate

        Returns:
            SubmissionJoinResult with accepted matches in evaluation order
        """
        outcome = SubmissionJoinResult(submission_id=submission.identifier)
        statistics = outcome.statistics
        statistics.submissions_processed = 1

        try:
            box = self.capability.bounding_box(submission.geometry)
        except GeometryOperationError as e:
            logger.warning(f"Submission {submission.identifier} skipped: {e}")
            statistics.invalid_submissions += 1
            return outcome

        candidates = index.query(box)
        statistics.candidate_pairs = len(candidates)

        for block in candidates:
            pair_outcome, result = self.evaluate_pair(submission, block)
            statistics.record_outcome(pair_outcome)
            if result is not None:
                outcome.matches.append((block.identifier, result))

        logger.debug(f"Submission {submission.identifier}: {len(candidates)} candidates, "
                     f"{len(outcome.matches)} accepted")
        return outcome

    def evaluate_pair(self, submission: Submission,
                      block: Block) -> Tuple[PairOutcome, Optional[IntersectionResult]]:
        """Apply the exact overlap test, overlay construction and area-ratio filter.

        Args:
            submission: Submission of the candidate pair
            block: Block of the candidate pair (bounding boxes already overlap)

        Returns:
            Outcome of the pair and, when accepted, the new IntersectionResult
        """
        try:
            if not self.capability.overlaps(submission.geometry, block.geometry):
                return PairOutcome.NO_OVERLAP, None
        except GeometryOperationError as e:
            logger.warning(f"Overlap test failed for submission {submission.identifier} "
                           f"and block {block.identifier}: {e}")
            return PairOutcome.OVERLAP_TEST_ERROR, None

        try:
            overlay = self.capability.intersection(submission.geometry, block.geometry)
        except GeometryOperationError as e:
            logger.warning(f"Overlay failed for submission {submission.identifier} "
                           f"and block {block.identifier}: {e}")
            return PairOutcome.OVERLAY_FAILED, None

        if overlay is None:
            return PairOutcome.EMPTY_OVERLAY, None

        overlay_area = self.capability.area(overlay)
        if overlay_area <= 0.0:
            return PairOutcome.EMPTY_OVERLAY, None

        ratio = overlay_area / block.area
        if ratio < self.config.area_ratio_threshold:
            logger.debug(f"Submission {submission.identifier} / block {block.identifier}: "
                         f"ratio {ratio:.6f} below threshold")
            return PairOutcome.BELOW_THRESHOLD, None

        return PairOutcome.ACCEPTED, IntersectionResult.for_submission(submission, overlay)

    def _run_sequential(self, index: BlockIndex, submissions: List[Submission],
                        table: ResultTable, statistics: JoinStatistics,
                        cancel_event: Optional[threading.Event]) -> bool:
        for submission in submissions:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Join cancelled after {statistics.submissions_processed} submissions")
                return True
            self._record(self.join_submission(index, submission), table, statistics)
        return False

    def _run_concurrent(self, index: BlockIndex, submissions: List[Submission],
                        table: ResultTable, statistics: JoinStatistics,
                        cancel_event: Optional[threading.Event]) -> bool:
        """Evaluate submissions on a thread pool.

        Outcomes are recorded in submission order, so the table matches a
        sequential run exactly. Recording stops at the first submission that
        saw the cancel event; later outcomes are discarded and pending work
        is cancelled, so a cancelled table always holds a prefix of the
        submissions.
        """
        cancelled = False
        with ThreadPoolExecutor(max_workers=self.config.max_workers,
                                thread_name_prefix="overlay-join") as executor:
            futures = [
                executor.submit(self._join_unless_cancelled, index, submission, cancel_event)
                for submission in submissions
            ]
            for future in futures:
                if cancelled:
                    future.cancel()
                    continue
                outcome = future.result()
                if outcome is None:
                    cancelled = True
                    continue
                self._record(outcome, table, statistics)

        if cancelled:
            logger.warning(f"Join cancelled after {statistics.submissions_processed} submissions")
        return cancelled

    def _join_unless_cancelled(self, index: BlockIndex, submission: Submission,
                               cancel_event: Optional[threading.Event]) -> Optional[SubmissionJoinResult]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return self.join_submission(index, submission)

    @staticmethod
    def _record(outcome: SubmissionJoinResult, table: ResultTable, statistics: JoinStatistics) -> None:
        for block_id, result in outcome.matches:
            table.record(block_id, result)
        statistics.merge(outcome.statistics)

    @staticmethod
    def _validate_unique_identifiers(blocks: List[Block]) -> None:
        seen = set()
        for block in blocks:
            if block.identifier in seen:
                raise GeoJoinValidationError(
                    "Duplicate block identifier",
                    {"identifier": block.identifier}
                )
            seen.add(block.identifier)
