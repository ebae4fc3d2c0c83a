"""
Endpoint directory and the caller-owned enabled/disabled selection.
"""

import re
import logging
from typing import Iterable, List

from rpc_bench.configuration import RPC_ENDPOINTS

logger = logging.getLogger(__name__)


def display_name(url: str) -> str:
    """Strip the scheme and trailing slash for tables and chart legends."""
    return re.sub(r"/$", "", re.sub(r"^https?://", "", url))


class Endpoint:
    """An RPC endpoint and whether it takes part in the next run."""

    def __init__(self, url: str, enabled: bool = True):
        self.url = url
        self.enabled = enabled

    def __eq__(self, other) -> bool:
        return isinstance(other, Endpoint) and (self.url, self.enabled) == (other.url, other.enabled)

    def __repr__(self) -> str:
        return f"Endpoint(url='{self.url}', enabled={self.enabled})"


class EndpointSet:
    """Ordered set of endpoints seeded once from the directory."""

    def __init__(self, urls: Iterable[str]):
        self.endpoints: List[Endpoint] = []
        for url in urls:
            if any(e.url == url for e in self.endpoints):
                continue
            self.endpoints.append(Endpoint(url))

    @classmethod
    def for_network(cls, network: str) -> "EndpointSet":
        """Seed an endpoint set from the directory entry of a network.

        Raises:
            ValueError: If the network is unknown
        """
        if network not in RPC_ENDPOINTS:
            raise ValueError(f"Unsupported network: {network}. Must be one of {list(RPC_ENDPOINTS)}.")
        endpoint_set = cls(RPC_ENDPOINTS[network])
        logger.info(f"Loaded {len(endpoint_set)} {network} endpoints")
        return endpoint_set

    def _find(self, url: str) -> Endpoint:
        for endpoint in self.endpoints:
            if endpoint.url == url:
                return endpoint
        raise KeyError(url)

    def toggle(self, url: str) -> bool:
        """Flip the enabled flag of an endpoint and return the new value."""
        endpoint = self._find(url)
        endpoint.enabled = not endpoint.enabled
        return endpoint.enabled

    def set_enabled(self, url: str, enabled: bool) -> None:
        self._find(url).enabled = enabled

    def only(self, urls: Iterable[str]) -> None:
        """Enable exactly the given endpoints."""
        wanted = set(urls)
        unknown = wanted - {e.url for e in self.endpoints}
        if unknown:
            logger.warning(f"Ignoring unknown endpoints: {sorted(unknown)}")
        for endpoint in self.endpoints:
            endpoint.enabled = endpoint.url in wanted

    def exclude(self, urls: Iterable[str]) -> None:
        """Disable the given endpoints, leaving the others untouched."""
        unwanted = set(urls)
        for endpoint in self.endpoints:
            if endpoint.url in unwanted:
                endpoint.enabled = False

    def enabled_urls(self) -> List[str]:
        return [e.url for e in self.endpoints if e.enabled]

    def urls(self) -> List[str]:
        return [e.url for e in self.endpoints]

    def __iter__(self):
        return iter(self.endpoints)

    def __len__(self) -> int:
        return len(self.endpoints)
