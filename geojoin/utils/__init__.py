"""
Utility modules for the GeoJoin block/submission overlay system.

This module provides utility functions and setup for logging used
throughout the system.
"""

from .logging_setup import setup_logging, get_logger, log_performance

__all__ = ["setup_logging", "get_logger", "log_performance"]
