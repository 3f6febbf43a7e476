"""Shapely Geometry Capability

Production implementation of the GeometryCapability interface backed by
shapely 2.x (GEOS). Overlay results are reduced to their polygonal part so
that boundary-only contacts (shared edges or corners) read as degenerate.
"""

import logging
from typing import Optional

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from geojoin.exceptions import GeometryOperationError
from geojoin.interfaces import BoundingBox, GeometryCapability

logger = logging.getLogger(__name__)


class ShapelyGeometryCapability(GeometryCapability):
    """Geometry capability over shapely geometries.

    Stateless, so a single instance can be shared between join worker threads.
    GEOS failures are re-raised as ``GeometryOperationError`` carrying the
    geometry types involved.
    """

    def bounding_box(self, geometry: BaseGeometry) -> BoundingBox:
        if geometry.is_empty:
            raise GeometryOperationError(
                "Cannot compute bounding box of an empty geometry",
                {"geom_type": geometry.geom_type}
            )
        return BoundingBox(*geometry.bounds)

    def overlaps(self, first: BaseGeometry, second: BaseGeometry) -> bool:
        try:
            return bool(first.intersects(second))
        except (GEOSException, ValueError) as e:
            raise GeometryOperationError(
                f"Overlap test failed: {e}",
                {"first": first.geom_type, "second": second.geom_type}
            ) from e

    def intersection(self, first: BaseGeometry, second: BaseGeometry) -> Optional[BaseGeometry]:
        try:
            overlay = first.intersection(second)
        except (GEOSException, ValueError) as e:
            raise GeometryOperationError(
                f"Overlay construction failed: {e}",
                {"first": first.geom_type, "second": second.geom_type}
            ) from e

        polygonal = polygonal_part(overlay)
        if polygonal is None:
            logger.debug(f"Overlay degenerated to {overlay.geom_type}")
        return polygonal

    def area(self, geometry: BaseGeometry) -> float:
        return float(geometry.area)


def polygonal_part(geometry: Optional[BaseGeometry]) -> Optional[BaseGeometry]:
    """Keep only the polygonal components of an overlay result.

    Args:
        geometry: Result of a shapely overlay operation

    Returns:
        Polygon or MultiPolygon, or None when nothing polygonal remains
    """
    if geometry is None or geometry.is_empty:
        return None
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry

    polygons = []
    for part in getattr(geometry, "geoms", ()):
        if isinstance(part, Polygon):
            polygons.append(part)
        elif isinstance(part, MultiPolygon):
            polygons.extend(part.geoms)

    polygons = [polygon for polygon in polygons if not polygon.is_empty]
    if not polygons:
        return None
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)
