"""GeoJoin Geometry Capability Interface

This module defines the abstract base class that every geometry backend must
implement for the overlay join engine, together with the bounding box value
type that the spatial index consumes.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional


class BoundingBox(NamedTuple):
    """Axis-aligned bounding box ``(minx, miny, maxx, maxy)``."""

    minx: float
    miny: float
    maxx: float
    maxy: float

    def intersects(self, other: "BoundingBox") -> bool:
        """Check box overlap. Shared edges and corners count as overlap."""
        return not (
            self.maxx < other.minx or other.maxx < self.minx or
            self.maxy < other.miny or other.maxy < self.miny
        )


class GeometryCapability(ABC):
    """Abstract base class for geometry backends used by the join engine.

    The join engine never touches geometry values directly; it asks a
    capability for bounding boxes, exact overlap, overlay construction and
    area. All primitives must be pure over immutable geometry values so that
    one capability instance can be shared between worker threads.

    Implementations report primitive failures by raising
    ``GeometryOperationError``; the engine skips the affected pair.
    """

    @abstractmethod
    def bounding_box(self, geometry: Any) -> BoundingBox:
        """Return the bounding box of a geometry.

        Args:
            geometry: Polygon geometry value

        Returns:
            BoundingBox enclosing the geometry
        """
        pass

    @abstractmethod
    def overlaps(self, first: Any, second: Any) -> bool:
        """Exact overlap test between two geometries.

        Bounding box overlap is necessary but not sufficient; this method must
        evaluate the real geometries.

        Args:
            first: Polygon geometry value
            second: Polygon geometry value

        Returns:
            bool: True if the geometries share at least one point

        Raises:
            GeometryOperationError: If the predicate cannot be evaluated
        """
        pass

    @abstractmethod
    def intersection(self, first: Any, second: Any) -> Optional[Any]:
        """Construct the overlap region of two geometries.

        Args:
            first: Polygon geometry value
            second: Polygon geometry value

        Returns:
            New polygon geometry for the overlap region, or None when the
            overlap is empty or degenerate (a point or a line)

        Raises:
            GeometryOperationError: If overlay construction fails
        """
        pass

    @abstractmethod
    def area(self, geometry: Any) -> float:
        """Planar area of a geometry.

        Args:
            geometry: Polygon geometry value

        Returns:
            float: Non-negative area
        """
        pass
