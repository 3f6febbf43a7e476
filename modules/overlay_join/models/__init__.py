"""Overlay Join Data Models

This package contains Pydantic data models for the overlay join module,
providing validation for blocks, submissions and accepted intersection results.
"""

from .block import Block
from .submission import Submission
from .intersection_result import IntersectionResult

__all__ = ['Block', 'Submission', 'IntersectionResult']
