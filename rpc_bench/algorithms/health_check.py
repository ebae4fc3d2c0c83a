"""
Health-check sweeps: one lightweight probe per endpoint, folded into the health store.
"""

import logging
from typing import Iterable, List, Optional

from rpc_bench.algorithms.round_runner import RoundRunner
from rpc_bench.common.errors import ValidationError
from rpc_bench.common.notifications import (
    Notification,
    LoggingNotifier,
    SEVERITY_WARNING,
)
from rpc_bench.persistence.health import HealthStore
from rpc_bench.persistence.record import ProbeOutcome

logger = logging.getLogger(__name__)


class HealthCheck:
    """Runs non-overlapping health sweeps and keeps per-endpoint health state current."""

    def __init__(
        self,
        system,
        store: HealthStore,
        notifier=None,
        exporter=None,
        round_runner: Optional[RoundRunner] = None,
    ):
        self.system = system
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.exporter = exporter
        # Sweeps only feed the health gauge, not the probe counters
        self.round_runner = round_runner or RoundRunner(system)

        self.is_checking: bool = False
        self.sweeps_completed: int = 0
        self.sweeps_skipped: int = 0

        logger.info("Initialized HealthCheck")

    async def sweep(self, endpoints: Iterable[str]) -> Optional[List[ProbeOutcome]]:
        """Probe every endpoint once and update its health record.

        A sweep requested while another one is in flight is rejected, not queued.

        Args:
            endpoints: Endpoint URLs to check

        Returns:
            The probe outcomes, or None if the request was rejected

        Raises:
            ValidationError: If no endpoint was given
        """
        if self.is_checking:
            self.sweeps_skipped += 1
            logger.info("Health check already in progress, ignoring request")
            return None

        endpoints = list(endpoints)
        if not endpoints:
            raise ValidationError("No RPC endpoint to check")

        self.is_checking = True
        try:
            request = self.system.health_request()
            try:
                outcomes = await self.round_runner.run_round(endpoints, request)
            except Exception as e:
                logger.warning(f"Health sweep dispatch failed, marking all endpoints failed: {e}")
                outcomes = [ProbeOutcome(endpoint=endpoint, error=str(e)) for endpoint in endpoints]

            for outcome in outcomes:
                record = self.store.get(outcome.endpoint)
                if outcome.ok:
                    record.record_success(outcome.latency_ms, timestamp=outcome.ts)
                else:
                    record.record_failure(outcome.error or "Unknown error", timestamp=outcome.ts)
                    logger.debug(f"Health probe failed for {outcome.endpoint}: {outcome.error}")

                if self.exporter:
                    self.exporter.update_health_score(outcome.endpoint, record.health_score)

            self.sweeps_completed += 1
            healthy = sum(1 for o in outcomes if o.ok)
            logger.info(f"Health check completed: {healthy}/{len(outcomes)} endpoints responded")

            if healthy == len(outcomes):
                self._notify(Notification(
                    "Health Check Complete", f"All {healthy} endpoints responded."
                ))
            else:
                self._notify(Notification(
                    "Health Check Complete",
                    f"{len(outcomes) - healthy} of {len(outcomes)} endpoints failed to respond.",
                    SEVERITY_WARNING,
                ))
            return outcomes

        finally:
            self.is_checking = False

    def _notify(self, notification: Notification):
        try:
            self.notifier.notify(notification)
        except Exception as e:
            logger.warning(f"Notification sink failed: {e}")
