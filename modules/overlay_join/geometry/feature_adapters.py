"""GeoJSON Feature Adapters

Conversions between in-memory GeoJSON-like feature mappings and the overlay
join entities. Nothing here touches the filesystem: callers parse their own
files and hand over feature dictionaries or FeatureCollection mappings.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError
from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape

from geojoin.exceptions import GeoJoinValidationError
from geojoin.interfaces import GeometryCapability
from ..models import Block, Submission, IntersectionResult

logger = logging.getLogger(__name__)

FeatureSource = Union[Mapping[str, Any], Iterable[Mapping[str, Any]]]


def iter_features(source: FeatureSource) -> List[Mapping[str, Any]]:
    """Return the features of a FeatureCollection mapping or a plain feature iterable."""
    if isinstance(source, Mapping):
        if source.get("type") != "FeatureCollection":
            raise GeoJoinValidationError(
                "Expected a FeatureCollection mapping",
                {"type": source.get("type")}
            )
        return list(source.get("features") or [])
    return list(source)


def _property(feature: Mapping[str, Any], name: str) -> Any:
    properties = feature.get("properties") or {}
    if name not in properties:
        raise GeoJoinValidationError(
            f"Feature is missing property '{name}'",
            {"available": sorted(properties)}
        )
    return properties[name]


def _geometry(feature: Mapping[str, Any]):
    geometry = feature.get("geometry")
    if not geometry:
        raise GeoJoinValidationError("Feature has no geometry")
    try:
        return shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, AttributeError) as e:
        raise GeoJoinValidationError(
            f"Invalid feature geometry: {e}",
            {"geometry_type": geometry.get("type")}
        ) from e


def block_from_feature(feature: Mapping[str, Any],
                       capability: GeometryCapability,
                       id_property: str = "geoid20",
                       area_property: Optional[str] = None) -> Block:
    """Build a Block from a GeoJSON feature.

    Args:
        feature: GeoJSON feature mapping with a polygon geometry
        capability: Capability used to compute the area when no area property is used
        id_property: Property holding the block identifier
        area_property: Property holding a precomputed area; computed when None

    Returns:
        Block with its area fixed at load time

    Raises:
        GeoJoinValidationError: If properties or geometry are missing or invalid
    """
    identifier = str(_property(feature, id_property))
    geometry = _geometry(feature)
    area = None
    if area_property:
        raw_area = _property(feature, area_property)
        try:
            area = float(raw_area)
        except (TypeError, ValueError) as e:
            raise GeoJoinValidationError(
                f"Block area is not a number: {raw_area!r}",
                {"identifier": identifier}
            ) from e

    try:
        return Block.from_geometry(identifier, geometry, capability, area=area)
    except ValidationError as e:
        raise GeoJoinValidationError(
            f"Invalid block feature: {e.error_count()} validation error(s)",
            {"identifier": identifier}
        ) from e


def submission_from_feature(feature: Mapping[str, Any],
                            id_property: str = "id",
                            label_property: str = "neighborhood") -> Submission:
    """Build a Submission from a GeoJSON feature.

    Every feature property is kept in ``Submission.attributes`` so that
    results can carry them onto their output features.

    Raises:
        GeoJoinValidationError: If properties or geometry are missing or invalid
    """
    raw_id = _property(feature, id_property)
    try:
        identifier = int(raw_id)
    except (TypeError, ValueError) as e:
        raise GeoJoinValidationError(
            f"Submission identifier is not an integer: {raw_id!r}"
        ) from e

    label = _property(feature, label_property)
    return Submission(
        identifier=identifier,
        label="" if label is None else str(label),
        geometry=_geometry(feature),
        attributes=dict(feature.get("properties") or {})
    )


def blocks_from_features(source: FeatureSource,
                         capability: GeometryCapability,
                         id_property: str = "geoid20",
                         area_property: Optional[str] = None) -> List[Block]:
    """Build all blocks of a collection, rejecting duplicate identifiers.

    Raises:
        GeoJoinValidationError: On an invalid feature or a duplicate identifier
    """
    blocks: List[Block] = []
    seen = set()
    for feature in iter_features(source):
        block = block_from_feature(feature, capability, id_property, area_property)
        if block.identifier in seen:
            raise GeoJoinValidationError(
                "Duplicate block identifier",
                {"identifier": block.identifier}
            )
        seen.add(block.identifier)
        blocks.append(block)

    logger.info(f"Loaded {len(blocks)} blocks from features")
    return blocks


def submissions_from_features(source: FeatureSource,
                              id_property: str = "id",
                              label_property: str = "neighborhood") -> List[Submission]:
    """Build all submissions of a collection."""
    submissions = [
        submission_from_feature(feature, id_property, label_property)
        for feature in iter_features(source)
    ]
    logger.info(f"Loaded {len(submissions)} submissions from features")
    return submissions


def result_to_feature(result: IntersectionResult,
                      id_property: str = "id",
                      label_property: str = "neighborhood") -> Dict[str, Any]:
    """GeoJSON feature mapping for an intersection result.

    The properties are a copy of the originating submission's feature
    properties, with the identifier and label written under
    ``id_property`` and ``label_property``.
    """
    properties = dict(result.attributes)
    properties[id_property] = result.submission_id
    properties[label_property] = result.submission_label
    return {
        "type": "Feature",
        "geometry": mapping(result.geometry),
        "properties": properties,
    }
