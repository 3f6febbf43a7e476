"""
GeoJoin Framework Core Package

This package contains the core infrastructure for the GeoJoin block/submission
overlay system: configuration loading, exceptions, logging and the geometry
capability interface shared by processing modules.
"""

from .interfaces import GeometryCapability, BoundingBox

__version__ = "1.0.0"
__all__ = ['GeometryCapability', 'BoundingBox']
