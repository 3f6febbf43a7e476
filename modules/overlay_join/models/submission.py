"""Submission Data Model

This module defines the Pydantic data model for submission records, the polygon
set that is streamed against the block index.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict


class Submission(BaseModel):
    """Data model for a submitted polygon.

    Attributes:
        identifier: Integer submission identifier
        label: Free-text label carried into every intersection result (e.g. neighborhood name)
        geometry: Polygon geometry value understood by the active geometry capability
        attributes: All properties of the source feature, carried onto result features
    """

    identifier: int = Field(..., description="Submission identifier")

    label: str = Field(..., description="Submission label carried into results")

    geometry: Any = Field(..., description="Polygon geometry value")

    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Full property mapping of the source feature"
    )

    @field_validator('geometry')
    @classmethod
    def validate_geometry(cls, v: Any) -> Any:
        if v is None:
            raise ValueError('Submission geometry is required')
        return v

    def properties(self) -> Dict[str, Any]:
        """Properties copied onto each intersection result."""
        return {"id": self.identifier, "label": self.label}

    def __repr__(self) -> str:
        return f"Submission(identifier={self.identifier}, label={self.label!r})"

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }
