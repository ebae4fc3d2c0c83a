"""Test suite for endpoint health tracking and health-check sweeps."""

import asyncio
import unittest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from prometheus_client import CollectorRegistry

from rpc_bench.algorithms.health_check import HealthCheck
from rpc_bench.common.errors import ProbeError, ValidationError
from rpc_bench.common.notifications import CollectingNotifier, SEVERITY_WARNING
from rpc_bench.persistence.health import EndpointHealth, HealthStore
from rpc_bench.persistence.prom import SimplePrometheusExporter


class TestEndpointHealth:
    """Test cases for a single endpoint's health record."""

    def test_fresh_record(self):
        record = EndpointHealth("https://a")
        assert record.total_checks == 0
        assert record.uptime == 100.0
        assert record.reliability == 100.0
        assert record.health_score == 100
        assert record.avg_latency == 0.0
        assert list(record.health_history) == []
        assert record.last_checked is None

    def test_running_mean(self):
        record = EndpointHealth("https://a")
        for latency in (100.0, 200.0, 600.0):
            record.record_success(latency)
        assert record.avg_latency == 300.0
        assert record.response_success == 3

    def test_score_blends_reliability_and_latency(self):
        record = EndpointHealth("https://a")
        record.record_success(1000.0)
        assert record.health_score == 85

        record.record_success(3000.0)
        # Running average is now 2000 ms, latency share is gone
        assert record.health_score == 70

    def test_failure_penalty_and_floor(self):
        record = EndpointHealth("https://a")
        record.record_failure("timeout")
        assert record.health_score == 80
        for _ in range(10):
            record.record_failure("timeout")
        assert record.health_score == 0
        assert record.response_failure == 11
        assert record.uptime == 0.0

    def test_failure_keeps_average_latency(self):
        record = EndpointHealth("https://a")
        record.record_success(400.0)
        record.record_failure("HTTP 502")
        assert record.avg_latency == 400.0
        assert list(record.latency_history) == [400.0]
        assert len(record.health_history) == 2

    def test_reliability_uses_recent_window(self):
        """Old failures fall out of reliability but stay in uptime."""
        record = EndpointHealth("https://a")
        for _ in range(5):
            record.record_failure("down")
        for _ in range(20):
            record.record_success(10.0)

        assert record.reliability == 100.0
        assert record.uptime == 80.0

    def test_mixed_window(self):
        record = EndpointHealth("https://a")
        record.record_success(10.0)
        record.record_failure("down")
        record.record_success(10.0)
        record.record_failure("down")
        assert record.reliability == 50.0

    def test_history_is_capped(self):
        record = EndpointHealth("https://a")
        for i in range(15):
            record.record_success(float(i))
        assert len(record.health_history) == 10
        assert list(record.latency_history) == [float(i) for i in range(5, 15)]

    def test_error_events(self):
        record = EndpointHealth("https://a", error_capacity=3)
        for i in range(5):
            record.record_failure(f"error {i}", timestamp=1000.0 + i)

        assert [e.message for e in record.errors] == ["error 2", "error 3", "error 4"]
        assert record.errors[-1].timestamp == 1004.0
        assert record.last_checked == 1004.0
        assert record.to_dict()['last_error'] == "error 4"


class TestHealthStore:
    """Test cases for the keyed health store."""

    def test_seeded_and_lazy_records(self):
        store = HealthStore(["https://a"])
        assert "https://a" in store
        assert "https://b" not in store
        store.get("https://b").record_success(5.0)
        assert len(store) == 2

    def test_reinitialize(self):
        store = HealthStore(["https://a"])
        store.get("https://a").record_failure("down")
        store.reinitialize()
        assert store.get("https://a").total_checks == 0

        store.reinitialize(["https://c"])
        assert [r.endpoint for r in store.all()] == ["https://c"]


class FakeHealthSystem:
    """Answers health probes from a dict; None fails, a gate can hold probes open."""

    def __init__(self, latencies, gate=None):
        self.latencies = latencies
        self.gate = gate
        self.calls = 0

    def health_request(self):
        return "sui_getLatestCheckpointSequenceNumber"

    async def probe(self, endpoint, request):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        value = self.latencies[endpoint]
        if value is None:
            raise ProbeError(endpoint, "HTTP 503")
        return value


class TestHealthCheck(unittest.IsolatedAsyncioTestCase):
    """Test health-check sweeps."""

    async def test_sweep_updates_records(self):
        store = HealthStore()
        notifier = CollectingNotifier()
        system = FakeHealthSystem({"https://a": 100.0, "https://b": None})
        check = HealthCheck(system, store, notifier)

        outcomes = await check.sweep(["https://a", "https://b"])

        self.assertEqual(len(outcomes), 2)
        self.assertEqual(store.get("https://a").response_success, 1)
        self.assertEqual(store.get("https://b").response_failure, 1)
        self.assertEqual(store.get("https://b").health_score, 80)
        self.assertEqual(store.get("https://b").errors[-1].message, "HTTP 503")
        self.assertEqual(check.sweeps_completed, 1)
        self.assertEqual(notifier.notifications[-1].severity, SEVERITY_WARNING)
        self.assertEqual(notifier.notifications[-1].description, "1 of 2 endpoints failed to respond.")

    async def test_all_healthy_notification(self):
        notifier = CollectingNotifier()
        check = HealthCheck(FakeHealthSystem({"https://a": 1.0}), HealthStore(), notifier)
        await check.sweep(["https://a"])
        self.assertEqual(notifier.notifications[-1].description, "All 1 endpoints responded.")

    async def test_overlapping_sweep_is_ignored(self):
        """A sweep requested while one is running changes nothing."""
        gate = asyncio.Event()
        store = HealthStore()
        system = FakeHealthSystem({"https://a": 10.0}, gate=gate)
        check = HealthCheck(system, store)

        first = asyncio.create_task(check.sweep(["https://a"]))
        await asyncio.sleep(0)
        self.assertTrue(check.is_checking)

        self.assertIsNone(await check.sweep(["https://a"]))
        self.assertEqual(check.sweeps_skipped, 1)

        gate.set()
        await first

        self.assertFalse(check.is_checking)
        self.assertEqual(system.calls, 1)
        self.assertEqual(store.get("https://a").total_checks, 1)
        self.assertEqual(check.sweeps_completed, 1)

    async def test_empty_sweep_is_validation_error(self):
        check = HealthCheck(FakeHealthSystem({}), HealthStore())
        with self.assertRaises(ValidationError):
            await check.sweep([])
        self.assertFalse(check.is_checking)

    async def test_exporter_gauge(self):
        registry = CollectorRegistry()
        exporter = SimplePrometheusExporter(registry=registry)
        check = HealthCheck(FakeHealthSystem({"https://a": None}), HealthStore(), exporter=exporter)

        await check.sweep(["https://a"])

        self.assertEqual(registry.get_sample_value("rpc_bench_health_score", {"endpoint": "https://a"}), 80.0)

    async def test_sweeps_stay_out_of_probe_counters(self):
        """Health probes do not inflate the latency test's probe counters or histogram."""
        registry = CollectorRegistry()
        exporter = SimplePrometheusExporter(registry=registry)
        check = HealthCheck(
            FakeHealthSystem({"https://a": 50.0, "https://b": None}), HealthStore(), exporter=exporter
        )

        await check.sweep(["https://a", "https://b"])

        for status in ("ok", "error"):
            for endpoint in ("https://a", "https://b"):
                self.assertIsNone(registry.get_sample_value(
                    "rpc_bench_probes_total", {"endpoint": endpoint, "status": status}
                ))
        self.assertIsNone(registry.get_sample_value(
            "rpc_bench_probe_latency_seconds_count", {"endpoint": "https://a"}
        ))
        self.assertIsNotNone(registry.get_sample_value("rpc_bench_health_score", {"endpoint": "https://a"}))


class TestWindowSizes:
    """Test cases for explicit window sizes."""

    def test_explicit_sizes_are_kept(self):
        record = EndpointHealth("https://a", history_capacity=1, reliability_window=2, error_capacity=1)
        assert record.health_history.maxlen == 1
        assert record.outcomes.maxlen == 2
        assert record.errors.maxlen == 1

    def test_zero_sizes_rejected(self):
        for kwargs in ({'history_capacity': 0}, {'reliability_window': 0}, {'error_capacity': 0}):
            with pytest.raises(ValueError):
                EndpointHealth("https://a", **kwargs)


if __name__ == '__main__':
    unittest.main()
