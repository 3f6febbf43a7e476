"""Overlay Join Engine for the Overlay Join module

Spatial join between submissions and an index of blocks with exact overlap
testing, overlay construction, area-ratio filtering and per-block aggregation.
"""

from .join_models import (
    PairOutcome,
    JoinConfig,
    JoinStatistics,
    SubmissionJoinResult,
    JoinRunResult,
    DEFAULT_AREA_RATIO_THRESHOLD,
)
from .join_engine import OverlayJoinEngine

__all__ = [
    # Core models
    'PairOutcome',
    'JoinConfig',
    'JoinStatistics',
    'SubmissionJoinResult',
    'JoinRunResult',
    'DEFAULT_AREA_RATIO_THRESHOLD',
    # Main engine
    'OverlayJoinEngine'
]
