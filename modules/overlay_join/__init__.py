"""Overlay Join Module

This module computes every block/submission intersection whose area reaches a
minimum share of the block's area, and groups the overlap regions by block
identifier.
"""

from .models import Block, Submission, IntersectionResult
from .aggregation import ResultTable
from .spatial_index import BlockIndex
from .geometry import ShapelyGeometryCapability
from .join_engine import JoinConfig, JoinRunResult, JoinStatistics, OverlayJoinEngine, PairOutcome
from .processor import OverlayJoiner

__all__ = [
    'Block',
    'Submission',
    'IntersectionResult',
    'ResultTable',
    'BlockIndex',
    'ShapelyGeometryCapability',
    'JoinConfig',
    'JoinRunResult',
    'JoinStatistics',
    'OverlayJoinEngine',
    'PairOutcome',
    'OverlayJoiner',
]
