"""Result aggregation for the overlay join module."""

from .result_table import ResultTable

__all__ = ['ResultTable']
