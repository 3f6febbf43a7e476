"""
Custom exceptions for the GeoJoin block/submission overlay system.

This module provides domain-specific exception classes for error handling
and debugging throughout the system.
"""

from .custom_exceptions import (
    GeoJoinBaseException,
    GeoJoinConfigurationError,
    GeoJoinValidationError,
    GeoJoinProcessingError,
    GeometryOperationError,
    GeoJoinStateError,
)

__all__ = [
    "GeoJoinBaseException",
    "GeoJoinConfigurationError",
    "GeoJoinValidationError",
    "GeoJoinProcessingError",
    "GeometryOperationError",
    "GeoJoinStateError",
]
