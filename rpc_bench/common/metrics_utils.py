"""
Shared utilities for latency statistics: average, nearest-rank percentiles and health factors.
"""

import math
import logging
from typing import Dict, Sequence

from rpc_bench.configuration import (
    P50,
    P90,
    LATENCY_CEILING_MS,
    RELIABILITY_WEIGHT,
    LATENCY_WEIGHT,
)

logger = logging.getLogger(__name__)


def calculate_average(samples: Sequence[float]) -> float:
    """
    Calculate the arithmetic mean of a sample.

    Callers are expected to guard against empty input; an empty sample
    yields NaN rather than raising.

    Args:
        samples: Latency values in milliseconds

    Returns:
        Arithmetic mean, or NaN for an empty sample
    """
    if len(samples) == 0:
        return math.nan
    return sum(samples) / len(samples)


def calculate_percentile(samples: Sequence[float], percentile: float) -> float:
    """
    Calculate a nearest-rank percentile.

    The sample is sorted ascending and the element at index
    ``ceil(percentile * len) - 1`` is returned. No interpolation is done,
    so p50 of ten values is the fifth smallest value.

    Args:
        samples: Latency values in milliseconds
        percentile: Percentile as a fraction in (0, 1]

    Returns:
        The selected sample, or NaN for an empty sample
    """
    if len(samples) == 0:
        return math.nan
    sorted_samples = sorted(samples)
    index = math.ceil(percentile * len(sorted_samples)) - 1
    index = min(max(index, 0), len(sorted_samples) - 1)
    return sorted_samples[index]


def calculate_latency_stats(latencies: Sequence[float]) -> Dict[str, float]:
    """
    Calculate the summary statistics reported for an endpoint.

    Args:
        latencies: Latency values of the scored rounds

    Returns:
        Dictionary with avg, p50 and p90
    """
    return {
        'avg': calculate_average(latencies),
        'p50': calculate_percentile(latencies, P50),
        'p90': calculate_percentile(latencies, P90),
    }


def calculate_latency_factor(latency_ms: float, ceiling_ms: float = None) -> float:
    """
    Map a latency onto [0, 1]: 1 for an instant response, 0 at or above the ceiling.
    """
    if ceiling_ms is None:
        ceiling_ms = LATENCY_CEILING_MS
    if ceiling_ms <= 0:
        raise ValueError(f"Latency ceiling must be positive (got {ceiling_ms})")
    return max(0.0, 1.0 - latency_ms / ceiling_ms)


def calculate_health_score(reliability_percent: float, latency_ms: float) -> int:
    """
    Blend reliability and latency into a health score in [0, 100].

    Args:
        reliability_percent: Success rate over the recent window, 0-100
        latency_ms: Representative latency for the endpoint

    Returns:
        Integer health score
    """
    reliability_factor = reliability_percent / 100.0
    latency_factor = calculate_latency_factor(latency_ms)
    score = round((reliability_factor * RELIABILITY_WEIGHT + latency_factor * LATENCY_WEIGHT) * 100)
    return max(0, min(100, score))
