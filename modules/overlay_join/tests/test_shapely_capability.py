"""Unit tests for the shapely geometry capability."""

import pytest
from unittest.mock import Mock
from shapely.errors import GEOSException
from shapely.geometry import (
    GeometryCollection, LineString, MultiLineString, MultiPolygon, Point, Polygon, box
)

from geojoin.exceptions import GeometryOperationError
from geojoin.interfaces import BoundingBox
from modules.overlay_join.geometry import ShapelyGeometryCapability, polygonal_part


@pytest.fixture
def capability():
    return ShapelyGeometryCapability()


def failing_geometry(method_name):
    geometry = Mock()
    geometry.geom_type = "Polygon"
    getattr(geometry, method_name).side_effect = GEOSException("TopologyException: side location conflict")
    return geometry


class TestBoundingBox:

    def test_bounds(self, capability):
        polygon = Polygon([(1, 2), (5, 2), (3, 7)])
        assert capability.bounding_box(polygon) == BoundingBox(1.0, 2.0, 5.0, 7.0)

    def test_empty_geometry_raises(self, capability):
        with pytest.raises(GeometryOperationError, match="empty geometry"):
            capability.bounding_box(Polygon())


class TestOverlaps:

    @pytest.mark.parametrize("other, expected", [
        (box(5, 5, 15, 15), True),
        (box(2, 2, 3, 3), True),
        (box(10, 0, 20, 10), True),
        (box(11, 0, 20, 10), False),
    ])
    def test_overlaps(self, capability, other, expected):
        assert capability.overlaps(box(0, 0, 10, 10), other) is expected

    def test_bounding_boxes_overlap_but_shapes_do_not(self, capability):
        triangle = Polygon([(0, 0), (10, 0), (0, 10)])
        corner = box(8, 8, 10, 10)

        assert capability.overlaps(triangle, corner) is False

    def test_geos_failure_is_wrapped(self, capability):
        with pytest.raises(GeometryOperationError) as exc_info:
            capability.overlaps(failing_geometry("intersects"), box(0, 0, 1, 1))

        assert exc_info.value.context == {"first": "Polygon", "second": "Polygon"}
        assert isinstance(exc_info.value.__cause__, GEOSException)


class TestIntersection:

    def test_partial_overlap(self, capability):
        result = capability.intersection(box(0, 0, 10, 10), box(5, 5, 15, 15))

        assert isinstance(result, Polygon)
        assert result.area == pytest.approx(25.0)

    def test_returns_new_geometry(self, capability):
        block = box(0, 0, 10, 10)
        inner = box(2, 2, 3, 3)

        result = capability.intersection(inner, block)

        assert result is not inner
        assert result.equals(inner)

    @pytest.mark.parametrize("other", [
        box(10, 0, 20, 10),
        box(10, 10, 20, 20),
        box(20, 20, 30, 30),
    ])
    def test_degenerate_or_empty_overlap_is_none(self, capability, other):
        assert capability.intersection(box(0, 0, 10, 10), other) is None

    def test_geos_failure_is_wrapped(self, capability):
        with pytest.raises(GeometryOperationError, match="Overlay construction failed"):
            capability.intersection(failing_geometry("intersection"), box(0, 0, 1, 1))


class TestArea:

    def test_area(self, capability):
        assert capability.area(box(0, 0, 4, 2.5)) == 10.0
        assert isinstance(capability.area(box(0, 0, 1, 1)), float)


class TestPolygonalPart:

    def test_polygon_passes_through(self):
        polygon = box(0, 0, 1, 1)
        assert polygonal_part(polygon) is polygon

    def test_multipolygon_passes_through(self):
        multi = MultiPolygon([box(0, 0, 1, 1), box(2, 2, 3, 3)])
        assert polygonal_part(multi) is multi

    @pytest.mark.parametrize("geometry", [
        None,
        Polygon(),
        Point(1, 1),
        LineString([(0, 0), (1, 0)]),
        MultiLineString([[(0, 0), (1, 0)], [(2, 0), (3, 0)]]),
        GeometryCollection([Point(0, 0), LineString([(0, 0), (0, 1)])]),
    ])
    def test_nothing_polygonal_is_none(self, geometry):
        assert polygonal_part(geometry) is None

    def test_collection_keeps_single_polygon(self):
        collection = GeometryCollection([box(0, 0, 1, 1), LineString([(1, 1), (2, 2)])])

        result = polygonal_part(collection)

        assert isinstance(result, Polygon)
        assert result.area == 1.0

    def test_collection_keeps_all_polygons(self):
        collection = GeometryCollection([
            box(0, 0, 1, 1),
            Point(5, 5),
            MultiPolygon([box(2, 2, 3, 3), box(4, 4, 5, 5)]),
        ])

        result = polygonal_part(collection)

        assert isinstance(result, MultiPolygon)
        assert len(result.geoms) == 3
        assert result.area == 3.0
