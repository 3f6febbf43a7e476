"""Block Data Model

This module defines the Pydantic data model for block records, the polygon set
that the overlay join indexes. A block's area is computed once when the block
is loaded and is never recomputed during a join run.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional

from geojoin.interfaces import GeometryCapability


class Block(BaseModel):
    """Data model for a block polygon with its precomputed area.

    Attributes:
        identifier: Stable block identifier, unique across the block set (e.g. a GEOID)
        geometry: Polygon geometry value understood by the active geometry capability
        area: Positive planar area, computed once at load time
    """

    identifier: str = Field(
        ...,
        description="Stable block identifier, unique across the block set",
        min_length=1
    )

    geometry: Any = Field(
        ...,
        description="Polygon geometry value"
    )

    area: float = Field(
        ...,
        description="Block area computed once at load time",
        gt=0,
        allow_inf_nan=False
    )

    @field_validator('geometry')
    @classmethod
    def validate_geometry(cls, v: Any) -> Any:
        """Reject missing geometries.

        Raises:
            ValueError: If geometry is None
        """
        if v is None:
            raise ValueError('Block geometry is required')
        return v

    @classmethod
    def from_geometry(cls, identifier: str, geometry: Any,
                      capability: GeometryCapability,
                      area: Optional[float] = None) -> "Block":
        """Create a block, computing its area through the capability.

        Args:
            identifier: Block identifier
            geometry: Polygon geometry value
            capability: Geometry capability used for the one-off area computation
            area: Precomputed area; when given the capability is not consulted

        Returns:
            Block with its area fixed for the rest of its lifetime
        """
        if area is None:
            area = capability.area(geometry)
        return cls(identifier=identifier, geometry=geometry, area=area)

    def __repr__(self) -> str:
        return f"Block(identifier={self.identifier!r}, area={self.area})"

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
        "json_schema_extra": {
            "example": {
                "identifier": "060750101001000",
                "geometry": "POLYGON ((0 0, 10 0, 10 10, 0 10, 0 0))",
                "area": 100.0
            }
        }
    }
