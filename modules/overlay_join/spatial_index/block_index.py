"""Block Spatial Index

Bulk-loaded bounding box index over the block set. Backed by a shapely
STRtree built over block envelopes, so query cost stays O(log n + k) for k
candidates. The index is read-only after ``build`` and safe to query from
several threads.
"""

import logging
from typing import Iterable, List, Optional

import shapely
from shapely.strtree import STRtree

from geojoin.exceptions import GeometryOperationError, GeoJoinStateError, GeoJoinValidationError
from geojoin.interfaces import BoundingBox, GeometryCapability
from ..models import Block

logger = logging.getLogger(__name__)

DEFAULT_NODE_CAPACITY = 10


class BlockIndex:
    """Bounding box range index over blocks.

    Envelopes come from the geometry capability, so the index works with any
    backend; only the tree itself is shapely's.

    Example:
        index = BlockIndex(capability).build(blocks)
        candidates = index.query(capability.bounding_box(submission.geometry))
    """

    def __init__(self, capability: GeometryCapability,
                 node_capacity: int = DEFAULT_NODE_CAPACITY):
        """Initialize an empty, unbuilt index.

        Args:
            capability: Geometry capability providing block bounding boxes
            node_capacity: Maximum children per tree node (construction fan-out)

        Raises:
            GeoJoinValidationError: If node_capacity is below 2
        """
        if node_capacity < 2:
            raise GeoJoinValidationError(
                "Spatial index node capacity must be at least 2",
                {"node_capacity": node_capacity}
            )
        self.capability = capability
        self.node_capacity = node_capacity
        self._blocks: List[Block] = []
        self.skipped_blocks: List[Block] = []
        self._tree: Optional[STRtree] = None
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    def __len__(self) -> int:
        return len(self._blocks)

    def build(self, blocks: Iterable[Block]) -> "BlockIndex":
        """Bulk-load all block envelopes.

        An empty block set is valid; the built index then answers every
        query with an empty list. A block whose bounding box cannot be
        computed is logged, kept in ``skipped_blocks`` and never returned
        by ``query``.

        Args:
            blocks: Blocks to index, each appearing once

        Returns:
            This index, for chaining

        Raises:
            GeoJoinStateError: If the index was already built
        """
        if self._built:
            raise GeoJoinStateError("Spatial index has already been built")

        envelopes = []
        for block in blocks:
            try:
                box = self.capability.bounding_box(block.geometry)
            except GeometryOperationError as e:
                logger.warning(f"Block {block.identifier} left out of the index: {e}")
                self.skipped_blocks.append(block)
                continue
            self._blocks.append(block)
            envelopes.append(shapely.box(*box))

        if envelopes:
            self._tree = STRtree(envelopes, node_capacity=self.node_capacity)

        self._built = True
        logger.info(f"Built block index over {len(self._blocks)} blocks "
                    f"(node capacity {self.node_capacity}, {len(self.skipped_blocks)} skipped)")
        return self

    def query(self, box: BoundingBox) -> List[Block]:
        """Return every block whose bounding box intersects ``box``.

        Edges and corners that only touch count as intersecting. Each block
        appears at most once. Callers must not rely on the order.

        Raises:
            GeoJoinStateError: If the index has not been built
        """
        if not self._built:
            raise GeoJoinStateError("Spatial index queried before build")
        if self._tree is None:
            return []

        indices = self._tree.query(shapely.box(*box))
        return [self._blocks[i] for i in sorted(indices.tolist())]
