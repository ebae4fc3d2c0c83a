"""
Basic data structures for the RPC speed test.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ProbeOutcome:
    """One endpoint's result for one round. A missing latency means the probe failed."""

    endpoint: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    ts: float = field(default_factory=time.time)

    @property
    def ok(self) -> bool:
        return self.latency_ms is not None


# Outcomes of one round, positionally aligned with the endpoint list of the run
RoundResult = List[ProbeOutcome]


@dataclass(frozen=True)
class AggregateResult:
    """Per-endpoint summary of a completed test run."""

    endpoint: str
    average: float = math.nan
    p50: float = math.nan
    p90: float = math.nan
    error: bool = False

    @classmethod
    def failed(cls, endpoint: str) -> "AggregateResult":
        return cls(endpoint=endpoint, error=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'endpoint': self.endpoint,
            'average': self.average,
            'p50': self.p50,
            'p90': self.p90,
            'error': self.error,
        }
