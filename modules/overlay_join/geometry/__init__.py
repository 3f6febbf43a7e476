"""Geometry backend for the overlay join module.

Provides the shapely implementation of the geometry capability and adapters
between GeoJSON-like feature mappings and join entities.
"""

from .shapely_capability import ShapelyGeometryCapability, polygonal_part
from .feature_adapters import (
    block_from_feature,
    submission_from_feature,
    blocks_from_features,
    submissions_from_features,
    result_to_feature,
)

__all__ = [
    'ShapelyGeometryCapability',
    'polygonal_part',
    'block_from_feature',
    'submission_from_feature',
    'blocks_from_features',
    'submissions_from_features',
    'result_to_feature',
]
