"""Overlay Join Models

Data models for join configuration, per-pair outcomes, run statistics and run
results, using Pydantic for validation.
"""

from typing import Any, Dict, List, Tuple
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
import logging

from ..aggregation import ResultTable
from ..models import IntersectionResult
from ..spatial_index import DEFAULT_NODE_CAPACITY

logger = logging.getLogger(__name__)

DEFAULT_AREA_RATIO_THRESHOLD = 0.01


class PairOutcome(str, Enum):
    """Decision reached for one candidate submission/block pair."""
    ACCEPTED = "accepted"
    NO_OVERLAP = "no_overlap"
    OVERLAP_TEST_ERROR = "overlap_test_error"
    OVERLAY_FAILED = "overlay_failed"
    EMPTY_OVERLAY = "empty_overlay"
    BELOW_THRESHOLD = "below_threshold"


_OUTCOME_FIELDS = {
    PairOutcome.ACCEPTED: "accepted",
    PairOutcome.NO_OVERLAP: "no_overlap",
    PairOutcome.OVERLAP_TEST_ERROR: "overlap_test_errors",
    PairOutcome.OVERLAY_FAILED: "overlay_failures",
    PairOutcome.EMPTY_OVERLAY: "empty_overlays",
    PairOutcome.BELOW_THRESHOLD: "below_threshold",
}


class JoinConfig(BaseModel):
    """Configuration settings for the overlay join engine.

    Validation model for the ``join`` section of environment_config.json.
    Unknown keys are rejected so that misspelt settings do not silently fall
    back to defaults.
    """
    index_node_capacity: int = Field(DEFAULT_NODE_CAPACITY, ge=2, le=1000,
                                     description="Spatial index construction fan-out")
    area_ratio_threshold: float = Field(DEFAULT_AREA_RATIO_THRESHOLD, ge=0.0, le=1.0,
                                        description="Minimum intersection area / block area to accept")
    max_workers: int = Field(1, ge=1, le=64,
                             description="Worker threads evaluating submissions; 1 runs sequentially")

    model_config = {"extra": "forbid"}


class JoinStatistics(BaseModel):
    """Counters describing what happened during a join run.

    Every candidate pair lands in exactly one outcome counter, so the outcome
    counters always sum to ``candidate_pairs``.
    """
    submissions_processed: int = Field(0, ge=0, description="Submissions queried against the index")
    invalid_submissions: int = Field(0, ge=0, description="Submissions skipped for an unusable geometry")
    invalid_blocks: int = Field(0, ge=0, description="Blocks left out of the index for an unusable geometry")
    candidate_pairs: int = Field(0, ge=0, description="Pairs returned by bounding box queries")
    accepted: int = Field(0, ge=0, description="Pairs accepted into the result table")
    no_overlap: int = Field(0, ge=0, description="Pairs rejected by the exact overlap test")
    overlap_test_errors: int = Field(0, ge=0, description="Pairs whose overlap test failed")
    overlay_failures: int = Field(0, ge=0, description="Pairs whose overlay construction failed")
    empty_overlays: int = Field(0, ge=0, description="Pairs whose overlay was empty or degenerate")
    below_threshold: int = Field(0, ge=0, description="Pairs below the area ratio threshold")

    def record_outcome(self, outcome: PairOutcome) -> None:
        field_name = _OUTCOME_FIELDS[outcome]
        setattr(self, field_name, getattr(self, field_name) + 1)

    def merge(self, other: "JoinStatistics") -> None:
        """Add another statistics object's counters into this one."""
        for field_name in type(self).model_fields:
            setattr(self, field_name, getattr(self, field_name) + getattr(other, field_name))

    def get_outcome_total(self) -> int:
        return sum(getattr(self, field_name) for field_name in _OUTCOME_FIELDS.values())

    def get_skipped_failures(self) -> int:
        """Pairs skipped because a geometry operation failed."""
        return self.overlap_test_errors + self.overlay_failures

    def get_acceptance_rate(self) -> float:
        """Accepted pairs as a share of candidate pairs."""
        if self.candidate_pairs == 0:
            return 0.0
        return self.accepted / self.candidate_pairs

    def get_statistics_summary(self) -> Dict[str, Any]:
        return {
            "submissions_processed": self.submissions_processed,
            "invalid_blocks": self.invalid_blocks,
            "invalid_submissions": self.invalid_submissions,
            "candidate_pairs": self.candidate_pairs,
            "accepted": self.accepted,
            "acceptance_rate": round(self.get_acceptance_rate(), 4),
            "skipped_failures": self.get_skipped_failures(),
            "outcomes": {outcome.value: getattr(self, field_name)
                         for outcome, field_name in _OUTCOME_FIELDS.items()},
        }


class SubmissionJoinResult(BaseModel):
    """Accepted matches and counters for a single submission."""
    submission_id: int = Field(..., description="Submission identifier")
    matches: List[Tuple[str, IntersectionResult]] = Field(
        default_factory=list, description="(block identifier, result) pairs in evaluation order")
    statistics: JoinStatistics = Field(default_factory=JoinStatistics)


class JoinRunResult(BaseModel):
    """Result of one complete join run.

    Wraps the result table together with run statistics. The table is the
    authoritative output; ``total_intersections`` always equals the sum of
    per-block sequence lengths.
    """
    block_count: int = Field(ge=0, description="Blocks loaded into the index")
    submission_count: int = Field(ge=0, description="Submissions supplied to the run")
    results: ResultTable = Field(..., description="Accepted results grouped by block identifier")
    statistics: JoinStatistics = Field(..., description="Run counters")
    cancelled: bool = Field(False, description="Whether the run stopped early on request")
    processing_duration: float = Field(ge=0, description="Run duration in seconds")
    processing_timestamp: datetime = Field(default_factory=datetime.now, description="When the run completed")

    @property
    def total_intersections(self) -> int:
        return self.results.total()

    def get_run_summary(self) -> str:
        """Generate human-readable run summary."""
        status = "cancelled" if self.cancelled else "completed"
        return (f"Join {status}: {self.total_intersections} intersections across "
                f"{len(self.results)} blocks from {self.statistics.submissions_processed}/"
                f"{self.submission_count} submissions in {self.processing_duration:.2f}s "
                f"({self.statistics.get_skipped_failures()} pairs skipped on geometry failures)")

    def is_complete(self) -> bool:
        """Check whether every submission was evaluated."""
        return not self.cancelled and self.statistics.submissions_processed == self.submission_count

    model_config = {"arbitrary_types_allowed": True}
