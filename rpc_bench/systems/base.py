"""
Async base class for JSON-RPC systems with a pooled aiohttp session.
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

import aiohttp
from aiohttp.client_exceptions import ClientPayloadError

from rpc_bench.configuration import (
    REQUEST_TIMEOUT_SECONDS,
    CONNECT_TIMEOUT_SECONDS,
    MAX_CONNECTIONS,
    HTTP_SUCCESS_STATUS,
)
from rpc_bench.common.errors import ProbeError

logger = logging.getLogger(__name__)


class RpcRequest:
    """A JSON-RPC method plus its parameters.

    Parameters can be fixed or produced by a factory on every call, which lets
    workloads such as random object lookups avoid hitting endpoint caches.
    """

    def __init__(
        self,
        method: str,
        params: Optional[List[Any]] = None,
        params_factory: Optional[Callable[[], List[Any]]] = None,
    ):
        self.method = method
        self.params = params or []
        self.params_factory = params_factory

    def build_params(self) -> List[Any]:
        if self.params_factory is not None:
            return self.params_factory()
        return list(self.params)

    def __repr__(self) -> str:
        return f"RpcRequest(method='{self.method}')"


class RpcSystem:
    """Async JSON-RPC client shared by every endpoint of a test.

    One ``aiohttp.ClientSession`` is opened per context and reused for all
    endpoints so connection setup is only paid once per host.
    """

    def __init__(
        self,
        request_timeout: float = None,
        connect_timeout: float = None,
        max_connections: int = None,
    ):
        self.request_timeout = REQUEST_TIMEOUT_SECONDS if request_timeout is None else request_timeout
        self.connect_timeout = CONNECT_TIMEOUT_SECONDS if connect_timeout is None else connect_timeout
        self.max_connections = MAX_CONNECTIONS if max_connections is None else max_connections
        if self.request_timeout <= 0 or self.connect_timeout <= 0:
            raise ValueError("Request and connect timeouts must be positive")
        if self.max_connections < 1:
            raise ValueError(f"max_connections must be positive (got {self.max_connections})")
        self.session: Optional[aiohttp.ClientSession] = None
        self._request_ids = itertools.count(1)

        # Performance metrics
        self._metrics = {
            'total_calls': 0,
            'successful_calls': 0,
            'failed_calls': 0,
            'total_latency_ms': 0.0,
        }
        self._metrics_lock = asyncio.Lock()

        logger.info(
            f"Initialized RPC system (timeout={self.request_timeout}s, "
            f"max_connections={self.max_connections})"
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(
                total=self.request_timeout,
                connect=self.connect_timeout,
            ),
            connector=aiohttp.TCPConnector(limit=self.max_connections),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()
            self.session = None

    async def call(self, endpoint: str, method: str, params: List[Any]) -> Tuple[Any, float]:
        """Send one JSON-RPC request and measure the wall time until the body is parsed.

        Args:
            endpoint: RPC endpoint URL
            method: JSON-RPC method name
            params: JSON-RPC positional parameters

        Returns:
            Tuple of (result, latency_ms)

        Raises:
            ProbeError: On transport errors, timeouts, non-200 responses or JSON-RPC errors
        """
        if not self.session:
            raise RuntimeError("RPC session not initialized. Use async context manager.")

        body = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }

        start_time = time.perf_counter()
        try:
            async with self.session.post(endpoint, json=body) as response:
                if response.status != HTTP_SUCCESS_STATUS:
                    raise ProbeError(endpoint, f"HTTP {response.status}")
                payload = await response.json(content_type=None)
            latency_ms = (time.perf_counter() - start_time) * 1000

            if not isinstance(payload, dict):
                raise ProbeError(endpoint, "Malformed JSON-RPC response")
            if payload.get("error"):
                error = payload["error"]
                message = error.get("message", error) if isinstance(error, dict) else error
                raise ProbeError(endpoint, f"JSON-RPC error: {message}")

            async with self._metrics_lock:
                self._metrics['total_calls'] += 1
                self._metrics['successful_calls'] += 1
                self._metrics['total_latency_ms'] += latency_ms

            return payload.get("result"), latency_ms

        except ProbeError as e:
            logger.debug(f"{method} failed on {endpoint}: {e.message}")
            await self._count_failure()
            raise

        except asyncio.TimeoutError:
            logger.warning(f"Timeout calling {method} on {endpoint}")
            await self._count_failure()
            raise ProbeError(endpoint, f"Timed out after {self.request_timeout}s")

        except ClientPayloadError as e:
            logger.warning(f"Incomplete payload from {endpoint}: {e}")
            await self._count_failure()
            raise ProbeError(endpoint, f"Incomplete payload: {e}") from e

        except aiohttp.ClientError as e:
            logger.debug(f"Client error calling {method} on {endpoint}: {e}")
            await self._count_failure()
            raise ProbeError(endpoint, str(e) or type(e).__name__) from e

        except ValueError as e:
            logger.debug(f"Invalid JSON from {endpoint}: {e}")
            await self._count_failure()
            raise ProbeError(endpoint, f"Invalid JSON: {e}") from e

    async def probe(self, endpoint: str, request: RpcRequest) -> float:
        """Issue one request against an endpoint and return its latency in milliseconds."""
        _, latency_ms = await self.call(endpoint, request.method, request.build_params())
        return latency_ms

    async def _count_failure(self):
        async with self._metrics_lock:
            self._metrics['total_calls'] += 1
            self._metrics['failed_calls'] += 1

    def get_metrics(self) -> dict:
        """Return a snapshot of cumulative call metrics."""
        metrics = dict(self._metrics)
        successful = metrics['successful_calls']
        metrics['avg_latency_ms'] = metrics['total_latency_ms'] / successful if successful else 0.0
        return metrics
