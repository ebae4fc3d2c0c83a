"""Test suite for latency statistics and health factors."""

import math
import sys
import os

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rpc_bench.common.metrics_utils import (
    calculate_average,
    calculate_percentile,
    calculate_latency_stats,
    calculate_latency_factor,
    calculate_health_score,
)


class TestAverage:
    """Test cases for the arithmetic mean."""

    def test_simple_average(self):
        """Average of 10, 20, 30 is 20."""
        assert calculate_average([10, 20, 30]) == 20

    def test_single_value(self):
        assert calculate_average([42.5]) == 42.5

    def test_empty_is_nan(self):
        """Empty input yields NaN instead of raising."""
        assert math.isnan(calculate_average([]))


class TestPercentile:
    """Test cases for nearest-rank percentiles."""

    def test_p50_of_one_to_ten(self):
        """p50 of 1..10 is the fifth value, not an interpolated 5.5."""
        assert calculate_percentile(list(range(1, 11)), 0.5) == 5

    def test_p90_of_one_to_ten(self):
        assert calculate_percentile(list(range(1, 11)), 0.9) == 9

    def test_p100_is_max(self):
        assert calculate_percentile([3, 1, 2], 1.0) == 3

    def test_unsorted_input(self):
        """Input order does not matter."""
        assert calculate_percentile([120, 100], 0.5) == 100
        assert calculate_percentile([120, 100], 0.9) == 120

    def test_input_not_mutated(self):
        samples = [5, 3, 9, 1]
        calculate_percentile(samples, 0.5)
        assert samples == [5, 3, 9, 1]

    def test_single_sample(self):
        assert calculate_percentile([77.0], 0.5) == 77.0
        assert calculate_percentile([77.0], 0.9) == 77.0

    def test_returns_actual_sample(self):
        """Nearest rank always returns a member of the sample."""
        samples = [11.0, 17.5, 23.25, 40.0, 41.0, 90.0, 91.5]
        for p in (0.1, 0.25, 0.5, 0.75, 0.9, 0.99):
            assert calculate_percentile(samples, p) in samples

    def test_empty_is_nan(self):
        assert math.isnan(calculate_percentile([], 0.5))


class TestLatencyStats:
    """Test cases for the combined per-endpoint statistics."""

    def test_two_samples(self):
        stats = calculate_latency_stats([100, 120])
        assert stats['avg'] == 110
        assert stats['p50'] == 100
        assert stats['p90'] == 120

    def test_ten_samples(self):
        stats = calculate_latency_stats([10, 90, 20, 80, 30, 70, 40, 60, 50, 100])
        assert stats['avg'] == 55
        assert stats['p50'] == 50
        assert stats['p90'] == 90


class TestHealthScore:
    """Test cases for the reliability/latency blend."""

    def test_latency_factor_bounds(self):
        assert calculate_latency_factor(0) == 1.0
        assert calculate_latency_factor(1000) == 0.5
        assert calculate_latency_factor(2000) == 0.0
        assert calculate_latency_factor(5000) == 0.0

    def test_explicit_ceiling(self):
        assert calculate_latency_factor(500, ceiling_ms=1000) == 0.5

    def test_zero_ceiling_rejected(self):
        with pytest.raises(ValueError):
            calculate_latency_factor(100, ceiling_ms=0)

    def test_perfect_endpoint(self):
        assert calculate_health_score(100, 0) == 100

    def test_blend(self):
        """Fully reliable at 1000 ms: 0.7 + 0.3 * 0.5."""
        assert calculate_health_score(100, 1000) == 85

    def test_slow_endpoint_keeps_reliability_share(self):
        assert calculate_health_score(100, 3000) == 70

    def test_unreliable_fast_endpoint(self):
        assert calculate_health_score(0, 0) == 30

    def test_score_range(self):
        for reliability in (0, 25, 50, 75, 100):
            for latency in (0, 250, 1999, 2000, 10000):
                score = calculate_health_score(reliability, latency)
                assert 0 <= score <= 100
