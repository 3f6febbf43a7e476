"""Spatial index over the block set."""

from .block_index import BlockIndex, DEFAULT_NODE_CAPACITY

__all__ = ['BlockIndex', 'DEFAULT_NODE_CAPACITY']
