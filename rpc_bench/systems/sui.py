"""
Sui JSON-RPC system and the workloads used to benchmark it.
"""

import logging
import secrets
from typing import Dict, List

from rpc_bench.systems.base import RpcSystem, RpcRequest
from rpc_bench.configuration import MULTI_GET_OBJECT_COUNT

logger = logging.getLogger(__name__)

# Package whose auction module is used for the transaction query workload
BIDDER_PACKAGE_ID = "0x7bfe75f51565a2e03e169c85a50c490ee707692a14d5417e2b97740da0d48627"

TEST_TYPE_INFO: Dict[str, Dict[str, str]] = {
    "multiGetObjects": {
        "title": "Multi-Object Retrieval",
        "description": (
            "Tests how quickly the RPC can fetch multiple objects in parallel. "
            "Useful for dApps that need to load many objects at once."
        ),
        "details": "Fetches 20 random objects with full content, type, and display data.",
    },
    "queryTransactionBlocks": {
        "title": "Transaction Query",
        "description": (
            "Tests transaction search and filtering performance. "
            "Ideal for explorers and analytics tools."
        ),
        "details": "Queries auction-related transactions with full effects and changes.",
    },
}


def generate_random_address() -> str:
    """Return a random 32-byte Sui address as 0x-prefixed lowercase hex."""
    return "0x" + secrets.token_hex(32)


def _multi_get_objects_params() -> List:
    return [
        [generate_random_address() for _ in range(MULTI_GET_OBJECT_COUNT)],
        {"showContent": True, "showType": True, "showDisplay": True},
    ]


def _query_transaction_blocks_params() -> List:
    query = {
        "filter": {
            "MoveFunction": {
                "package": BIDDER_PACKAGE_ID,
                "module": "auction",
                "function": "admin_creates_auction",
            }
        },
        "options": {
            "showEffects": True,
            "showObjectChanges": True,
            "showInput": True,
        },
    }
    # query, cursor, limit, descending order
    return [query, None, None, False]


class SuiSystem(RpcSystem):
    """Sui JSON-RPC system."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        logger.info("Initialized Sui system")

    @staticmethod
    def test_types() -> List[str]:
        return list(TEST_TYPE_INFO)

    @staticmethod
    def request_for(test_type: str) -> RpcRequest:
        """Build the request benchmarked by a test type.

        Raises:
            ValueError: If the test type is unknown
        """
        if test_type == "multiGetObjects":
            return RpcRequest("sui_multiGetObjects", params_factory=_multi_get_objects_params)
        elif test_type == "queryTransactionBlocks":
            return RpcRequest("suix_queryTransactionBlocks", params_factory=_query_transaction_blocks_params)
        else:
            raise ValueError(f"Unsupported test type: {test_type}. Must be one of {list(TEST_TYPE_INFO)}.")

    @staticmethod
    def health_request() -> RpcRequest:
        """Lightweight single request used by health checks."""
        return RpcRequest("sui_getLatestCheckpointSequenceNumber")
