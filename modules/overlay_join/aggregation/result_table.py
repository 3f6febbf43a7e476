"""Result Table Aggregator

Accumulates accepted intersection results keyed by block identifier for the
lifetime of one join run.
"""

import threading
from typing import Dict, Iterator, List, Tuple

from ..models import IntersectionResult


class ResultTable:
    """Insertion-ordered accumulator of intersection results per block.

    A key is created on its first ``record`` call, so blocks without accepted
    intersections never appear. ``record`` and the running total share one
    lock; concurrent writers never observe a partially appended result.
    No deduplication, reordering or eviction.
    """

    def __init__(self):
        self._results: Dict[str, List[IntersectionResult]] = {}
        self._total = 0
        self._lock = threading.Lock()

    def record(self, block_id: str, result: IntersectionResult) -> None:
        """Append a result under a block identifier and count it."""
        with self._lock:
            self._results.setdefault(block_id, []).append(result)
            self._total += 1

    def total(self) -> int:
        """Total number of accepted intersections recorded so far."""
        with self._lock:
            return self._total

    def get(self, block_id: str) -> List[IntersectionResult]:
        """Copy of the results recorded for one block (empty if none)."""
        with self._lock:
            return list(self._results.get(block_id, ()))

    def block_ids(self) -> List[str]:
        with self._lock:
            return list(self._results)

    def items(self) -> Iterator[Tuple[str, List[IntersectionResult]]]:
        """Iterate over a snapshot of ``(block_id, results)`` pairs."""
        return iter(self.as_dict().items())

    def as_dict(self) -> Dict[str, List[IntersectionResult]]:
        """Snapshot of the whole table."""
        with self._lock:
            return {block_id: list(results) for block_id, results in self._results.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def __contains__(self, block_id: object) -> bool:
        with self._lock:
            return block_id in self._results

    def __repr__(self) -> str:
        return f"ResultTable(blocks={len(self)}, total={self.total()})"
