"""
Periodic re-runs that never overlap.
"""

import asyncio
import time
import logging
from typing import Awaitable, Callable, Optional

from rpc_bench.configuration import AUTO_REPEAT_SECONDS

logger = logging.getLogger(__name__)


class AutoRepeat:
    """Triggers an async job on a fixed interval.

    A trigger that fires while the previous job (or anything reported by
    ``is_busy``) is still running is skipped, never queued.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable],
        interval_seconds: float = None,
        max_runs: Optional[int] = None,
        is_busy: Optional[Callable[[], bool]] = None,
        name: str = "auto-repeat",
    ):
        self.job = job
        if interval_seconds is None:
            interval_seconds = AUTO_REPEAT_SECONDS
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0 (got {interval_seconds})")
        self.interval_seconds = interval_seconds
        self.max_runs = max_runs
        self.is_busy = is_busy
        self.name = name

        self.runs_started: int = 0
        self.runs_skipped: int = 0
        self.current_task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()

        logger.info(
            f"Initialized {name}: every {self.interval_seconds}s"
            f"{f', {max_runs} runs' if max_runs else ''}"
        )

    def busy(self) -> bool:
        if self.current_task is not None and not self.current_task.done():
            return True
        return bool(self.is_busy and self.is_busy())

    def tick(self) -> bool:
        """Start the job unless a run is still active.

        Returns:
            True if a new run was started
        """
        if self.busy():
            self.runs_skipped += 1
            logger.info(f"{self.name}: previous run still active, skipping trigger")
            return False

        self.runs_started += 1
        self.current_task = asyncio.create_task(self._guarded())
        return True

    async def run(self) -> None:
        """Trigger the job every interval until stopped or ``max_runs`` runs were started."""
        self._stop_event.clear()
        try:
            while not self._stop_event.is_set():
                if self.max_runs is not None and self.runs_started >= self.max_runs:
                    break

                next_trigger = time.monotonic() + self.interval_seconds
                self.tick()
                if self.max_runs is not None and self.runs_started >= self.max_runs:
                    break

                remaining = next_trigger - time.monotonic()
                if remaining > 0:
                    try:
                        await asyncio.wait_for(self._stop_event.wait(), timeout=remaining)
                    except asyncio.TimeoutError:
                        pass
                elif self.current_task is not None and not self.current_task.done():
                    # Zero interval: run back to back
                    await asyncio.wait({self.current_task})
                else:
                    await asyncio.sleep(0)
        finally:
            if self.current_task is not None:
                await asyncio.gather(self.current_task, return_exceptions=True)

        logger.info(f"{self.name} finished: {self.runs_started} runs, {self.runs_skipped} skipped")

    def stop(self) -> None:
        self._stop_event.set()

    async def _guarded(self):
        try:
            await self.job()
        except Exception as e:
            # The job reports its own failures; keep the schedule alive
            logger.error(f"{self.name}: run failed: {e}")
