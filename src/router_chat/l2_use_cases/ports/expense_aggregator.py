"""Port: dependent expense aggregator notified after costed turns."""

from __future__ import annotations

from typing import Protocol


class ExpenseAggregator(Protocol):
    async def refresh(self) -> None:
        """Recompute cost-over-time. Failures stay inside the aggregator."""
        ...
