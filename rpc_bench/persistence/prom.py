"""
Simple Prometheus metrics exporter for the RPC speed test.
"""

import logging
from prometheus_client import CollectorRegistry, REGISTRY, start_http_server, Counter, Histogram, Gauge

from rpc_bench.configuration import METRICS_PORT

logger = logging.getLogger(__name__)


class SimplePrometheusExporter:
    """Simple Prometheus metrics exporter."""

    def __init__(self, port: int = METRICS_PORT, registry: CollectorRegistry = None):
        self.port = port
        self.registry = registry or REGISTRY
        self.server_started = False

        # Define metrics
        self.probes_total = Counter(
            'rpc_bench_probes_total', 'Total probes', ['endpoint', 'status'], registry=self.registry
        )
        self.probe_latency = Histogram(
            'rpc_bench_probe_latency_seconds', 'Probe latency', ['endpoint'], registry=self.registry
        )
        self.health_score = Gauge(
            'rpc_bench_health_score', 'Current endpoint health score', ['endpoint'], registry=self.registry
        )
        self.runs_total = Counter(
            'rpc_bench_runs_total', 'Completed test runs', ['outcome'], registry=self.registry
        )

    def start_server(self):
        """Start the Prometheus HTTP server."""
        if not self.server_started:
            try:
                start_http_server(self.port, registry=self.registry)
                self.server_started = True
                logger.info(f"Prometheus server started on port {self.port}")
            except Exception as e:
                logger.error(f"Failed to start Prometheus server: {e}")

    def record_probe(self, endpoint: str, latency_ms: float = None):
        """Record a probe outcome; a missing latency counts as a failure."""
        try:
            if latency_ms is None:
                self.probes_total.labels(endpoint=endpoint, status='error').inc()
            else:
                self.probes_total.labels(endpoint=endpoint, status='ok').inc()
                self.probe_latency.labels(endpoint=endpoint).observe(latency_ms / 1000)
        except Exception as e:
            logger.error(f"Failed to record probe metric: {e}")

    def update_health_score(self, endpoint: str, score: float):
        """Update health score metric."""
        try:
            self.health_score.labels(endpoint=endpoint).set(score)
        except Exception as e:
            logger.error(f"Failed to update health score metric: {e}")

    def record_run(self, outcome: str):
        """Record a finished test run ('success', 'failure' or 'cancelled')."""
        try:
            self.runs_total.labels(outcome=outcome).inc()
        except Exception as e:
            logger.error(f"Failed to record run metric: {e}")
