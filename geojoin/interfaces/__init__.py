"""GeoJoin Framework Interfaces

This package contains abstract interfaces shared by the GeoJoin framework,
providing standardized contracts for geometry backends.
"""

from .geometry_capability import GeometryCapability, BoundingBox

__all__ = ['GeometryCapability', 'BoundingBox']
