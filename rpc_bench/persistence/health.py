"""
Per-endpoint health state accumulated by health-check sweeps.
"""

import time
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterable, List, Optional

from rpc_bench.configuration import (
    HISTORY_CAPACITY,
    RELIABILITY_WINDOW,
    ERROR_LOG_CAPACITY,
    HEALTH_FAILURE_PENALTY,
    INITIAL_HEALTH_SCORE,
)
from rpc_bench.common.metrics_utils import calculate_health_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorEvent:
    """A failed health probe."""

    timestamp: float
    message: str


def _window_size(name: str, value: Optional[int], default: int) -> int:
    if value is None:
        return default
    if value < 1:
        raise ValueError(f"{name} must be positive (got {value})")
    return value


class EndpointHealth:
    """Cumulative health counters and derived scores for one endpoint.

    A fresh record starts at 100% uptime, 100% reliability and a health score
    of 100 with empty histories. Nothing is reset implicitly.
    """

    def __init__(
        self,
        endpoint: str,
        history_capacity: int = None,
        reliability_window: int = None,
        error_capacity: int = None,
    ):
        self.endpoint = endpoint
        self.response_success: int = 0
        self.response_failure: int = 0
        self.avg_latency: float = 0.0
        self.health_score: int = INITIAL_HEALTH_SCORE
        self.last_checked: Optional[float] = None

        history_capacity = _window_size('history_capacity', history_capacity, HISTORY_CAPACITY)
        reliability_window = _window_size('reliability_window', reliability_window, RELIABILITY_WINDOW)
        error_capacity = _window_size('error_capacity', error_capacity, ERROR_LOG_CAPACITY)

        self.outcomes: Deque[bool] = deque(maxlen=reliability_window)
        self.health_history: Deque[int] = deque(maxlen=history_capacity)
        self.latency_history: Deque[float] = deque(maxlen=history_capacity)
        self.errors: Deque[ErrorEvent] = deque(maxlen=error_capacity)

    @property
    def total_checks(self) -> int:
        return self.response_success + self.response_failure

    @property
    def uptime(self) -> float:
        """Lifetime success percentage."""
        if self.total_checks == 0:
            return 100.0
        return self.response_success / self.total_checks * 100

    @property
    def reliability(self) -> float:
        """Success percentage over the most recent outcomes only."""
        if not self.outcomes:
            return 100.0
        return sum(1 for ok in self.outcomes if ok) / len(self.outcomes) * 100

    def record_success(self, latency_ms: float, timestamp: float = None) -> None:
        """Fold a successful probe into the running average and rescore."""
        previous = self.response_success
        self.avg_latency = (self.avg_latency * previous + latency_ms) / (previous + 1)
        self.response_success += 1
        self.outcomes.append(True)
        self.last_checked = timestamp or time.time()

        self.health_score = calculate_health_score(self.reliability, self.avg_latency)
        self.health_history.append(self.health_score)
        self.latency_history.append(latency_ms)

    def record_failure(self, message: str, timestamp: float = None) -> None:
        """Count a failed probe and apply the flat score penalty."""
        self.response_failure += 1
        self.outcomes.append(False)
        self.last_checked = timestamp or time.time()

        self.health_score = max(0, self.health_score - HEALTH_FAILURE_PENALTY)
        self.health_history.append(self.health_score)
        self.errors.append(ErrorEvent(timestamp=self.last_checked, message=message))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'endpoint': self.endpoint,
            'response_success': self.response_success,
            'response_failure': self.response_failure,
            'uptime': self.uptime,
            'reliability': self.reliability,
            'avg_latency': self.avg_latency,
            'health_score': self.health_score,
            'last_checked': self.last_checked,
            'last_error': self.errors[-1].message if self.errors else None,
        }

    def __repr__(self) -> str:
        return (
            f"EndpointHealth(endpoint='{self.endpoint}', score={self.health_score}, "
            f"ok={self.response_success}, failed={self.response_failure})"
        )


class HealthStore:
    """Keyed store of EndpointHealth records, one per endpoint URL."""

    def __init__(self, endpoints: Iterable[str] = ()):
        self._records: Dict[str, EndpointHealth] = {}
        for endpoint in endpoints:
            self._records[endpoint] = EndpointHealth(endpoint)

        logger.info(f"Initialized HealthStore with {len(self._records)} endpoints")

    def get(self, endpoint: str) -> EndpointHealth:
        """Return the record for an endpoint, creating a fresh one on first use."""
        record = self._records.get(endpoint)
        if record is None:
            record = EndpointHealth(endpoint)
            self._records[endpoint] = record
        return record

    def all(self) -> List[EndpointHealth]:
        return list(self._records.values())

    def reinitialize(self, endpoints: Iterable[str] = None) -> None:
        """Drop all accumulated health state, optionally seeding a new endpoint set."""
        seed = list(endpoints) if endpoints is not None else list(self._records)
        self._records = {endpoint: EndpointHealth(endpoint) for endpoint in seed}
        logger.info(f"HealthStore reinitialized with {len(self._records)} endpoints")

    def __contains__(self, endpoint: str) -> bool:
        return endpoint in self._records

    def __len__(self) -> int:
        return len(self._records)
