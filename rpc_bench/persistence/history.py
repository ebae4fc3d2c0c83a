"""
Rolling latency history used for trend plots.
"""

import logging
from collections import deque
from typing import Deque, Dict, Iterable, List

from rpc_bench.configuration import HISTORY_CAPACITY
from rpc_bench.persistence.record import AggregateResult

logger = logging.getLogger(__name__)


class HistoryStore:
    """In-memory store of the most recent successful averages per endpoint.

    Each endpoint keeps at most ``capacity`` values, oldest first. Appending to
    a full window evicts the oldest value. Endpoints are kept in the order they
    were first recorded.

    Attributes:
        capacity: Maximum number of values kept per endpoint
    """

    def __init__(self, capacity: int = None):
        """Initialize an empty history.

        Args:
            capacity: Window size per endpoint (default: from configuration)
        """
        if capacity is None:
            capacity = HISTORY_CAPACITY
        if capacity < 1:
            raise ValueError(f"History capacity must be positive (got {capacity})")
        self.capacity: int = capacity
        self._history: Dict[str, Deque[float]] = {}

        logger.info(f"Initialized HistoryStore with capacity {self.capacity}")

    def record(self, endpoint: str, value: float) -> None:
        """Append a value to an endpoint's window, evicting the oldest when full.

        Args:
            endpoint: Endpoint URL
            value: Aggregate average latency in milliseconds
        """
        window = self._history.setdefault(endpoint, deque(maxlen=self.capacity))
        window.append(value)
        logger.debug(f"History for {endpoint}: {len(window)}/{self.capacity} values")

    def record_results(self, results: Iterable[AggregateResult]) -> int:
        """Record the average of every successful result; failed results leave history untouched.

        Returns:
            Number of endpoints whose history was updated
        """
        updated = 0
        for result in results:
            if result.error:
                continue
            self.record(result.endpoint, result.average)
            updated += 1
        return updated

    def get(self, endpoint: str) -> List[float]:
        """Return the current window for an endpoint, oldest first."""
        return list(self._history.get(endpoint, ()))

    def endpoints(self) -> List[str]:
        """Return endpoints that have at least one recorded value."""
        return [endpoint for endpoint, window in self._history.items() if window]

    def as_dict(self) -> Dict[str, List[float]]:
        return {endpoint: list(window) for endpoint, window in self._history.items() if window}

    def reset(self) -> None:
        """Forget all recorded history."""
        self._history.clear()
        logger.debug("HistoryStore reset")

    def __len__(self) -> int:
        return len(self.endpoints())

    def __repr__(self) -> str:
        return f"HistoryStore(endpoints={len(self)}, capacity={self.capacity})"
