"""
Single measurement round: one concurrent probe per endpoint.
"""

import asyncio
import logging
from typing import List

from rpc_bench.persistence.record import ProbeOutcome, RoundResult
from rpc_bench.common.errors import ProbeError

logger = logging.getLogger(__name__)


class RoundRunner:
    """Fans one request out to every endpoint and collects the results positionally."""

    def __init__(self, system, exporter=None):
        """Initialize the round runner.

        Args:
            system: Transport exposing ``async probe(endpoint, request) -> latency_ms``
            exporter: Optional Prometheus exporter receiving every probe outcome
        """
        self.system = system
        self.exporter = exporter

    async def run_round(self, endpoints: List[str], request) -> RoundResult:
        """Probe all endpoints concurrently.

        Every probe starts before any is awaited. A failing probe only fills its
        own slot; it never cancels the others.

        Args:
            endpoints: Endpoint URLs, in the order of the current run
            request: Request handed to the transport for every endpoint

        Returns:
            One ProbeOutcome per endpoint, aligned with ``endpoints``
        """
        tasks = [
            asyncio.create_task(self._probe(endpoint, request))
            for endpoint in endpoints
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes: RoundResult = []
        for endpoint, result in zip(endpoints, results):
            if isinstance(result, ProbeOutcome):
                outcome = result
            else:
                # _probe isolates ordinary errors; this covers cancellation and the like
                logger.warning(f"Probe task for {endpoint} ended abnormally: {result!r}")
                outcome = ProbeOutcome(endpoint=endpoint, error=str(result) or type(result).__name__)
            outcomes.append(outcome)

            if self.exporter:
                self.exporter.record_probe(endpoint, outcome.latency_ms)

        succeeded = sum(1 for o in outcomes if o.ok)
        logger.debug(f"Round finished: {succeeded}/{len(outcomes)} endpoints responded")
        return outcomes

    async def _probe(self, endpoint: str, request) -> ProbeOutcome:
        try:
            latency_ms = await self.system.probe(endpoint, request)
            return ProbeOutcome(endpoint=endpoint, latency_ms=latency_ms)
        except ProbeError as e:
            return ProbeOutcome(endpoint=endpoint, error=e.message)
        except Exception as e:
            logger.debug(f"Unexpected probe error for {endpoint}: {e}")
            return ProbeOutcome(endpoint=endpoint, error=str(e) or type(e).__name__)
