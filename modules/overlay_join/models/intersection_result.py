"""IntersectionResult Data Model

This module defines the Pydantic data model for an accepted block/submission
overlap. Results are only created on the join engine's accept path.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict

from .submission import Submission


class IntersectionResult(BaseModel):
    """Accepted overlap between one submission and one block.

    Attributes:
        geometry: Overlap region, a new geometry owned by the result
        submission_id: Identifier of the originating submission
        submission_label: Label of the originating submission
        tag: Secondary numeric tag reserved for downstream consumers; always 0.0 from the join
        attributes: Copy of the submission's feature properties
    """

    geometry: Any = Field(..., description="Overlap region geometry")
    submission_id: int = Field(..., description="Originating submission identifier")
    submission_label: str = Field(..., description="Originating submission label")
    tag: float = Field(0.0, description="Secondary tag reserved for downstream consumers")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Submission feature properties")

    @classmethod
    def for_submission(cls, submission: Submission, geometry: Any) -> "IntersectionResult":
        """Build a result carrying the submission's properties."""
        return cls(
            geometry=geometry,
            submission_id=submission.identifier,
            submission_label=submission.label,
            attributes=dict(submission.attributes),
        )

    def properties(self) -> Dict[str, Any]:
        """Carried submission properties."""
        return {"id": self.submission_id, "label": self.submission_label}

    def __repr__(self) -> str:
        return (f"IntersectionResult(submission_id={self.submission_id}, "
                f"submission_label={self.submission_label!r}, tag={self.tag})")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }
