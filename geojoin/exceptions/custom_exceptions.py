"""
Exceptions raised by the block/submission overlay join.

Every exception carries a message and an optional context dictionary naming
the block, submission or setting involved; the context is appended to the
string form so log lines identify the offending input.
"""

from typing import Optional, Dict, Any


class GeoJoinBaseException(Exception):
    """Root of the overlay join exceptions.

    ``str()`` renders as ``"<message> (Context: key=value, ...)"`` when a
    context is given; ``args`` holds only the plain message.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class GeoJoinConfigurationError(GeoJoinBaseException):
    """
    Join settings could not be loaded.

    Raised for a missing or unparseable
    environment_config.json, an unknown environment or section name, or a
    ``join`` section that fails JoinConfig validation.
    """
    pass


class GeoJoinValidationError(GeoJoinBaseException):
    """
    Block or submission input is unusable before any join starts.

    Covers features with missing properties or geometry, non-numeric block
    areas or submission identifiers, duplicate block identifiers and an
    index node capacity below 2. Aborts the run.
    """
    pass


class GeoJoinProcessingError(GeoJoinBaseException):
    """
    A geometry or join step failed while a run was in progress.

    Catching it covers every failure that happens after input validation;
    capability primitives raise the GeometryOperationError subclass.
    """
    pass


class GeometryOperationError(GeoJoinProcessingError):
    """
    A geometry capability primitive failed on one input.

    Raised when a bounding box, exact overlap test or overlay cannot be
    computed for a malformed geometry. The join engine never lets it abort
    a run: the block, submission or pair is skipped and counted.
    """
    pass


class GeoJoinStateError(GeoJoinBaseException):
    """
    A block index was used out of order (queried before build, or built twice).
    """
    pass
