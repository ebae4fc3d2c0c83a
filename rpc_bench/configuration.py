"""
Configuration constants for the RPC speed test.

This module contains all configuration parameters including:
- The RPC endpoint directory for every supported network
- Test parameters (rounds, request timeouts, connection limits)
- History and health-score parameters
- Scheduling and CLI defaults
"""

import os
from typing import Dict, List

# =============================================================================
# NETWORK CONFIGURATION
# =============================================================================

# Network used when none is given on the command line
RPC_NETWORK: str = os.getenv("RPC_NETWORK", "mainnet")

# Known public RPC endpoints per network, in display order
RPC_ENDPOINTS: Dict[str, List[str]] = {
    "mainnet": [
        "https://fullnode.mainnet.sui.io:443",
        "https://mainnet.suiet.app",
        "https://rpc-mainnet.suiscan.xyz",
        "https://mainnet.sui.rpcpool.com",
        "https://sui-mainnet.nodeinfra.com",
        "https://mainnet-rpc.sui.chainbase.online",
        "https://sui-mainnet-ca-1.cosmostation.io",
        "https://sui-mainnet-us-1.cosmostation.io",
        "https://sui-mainnet.public.blastapi.io",
        "https://sui-mainnet-endpoint.blockvision.org",
        "https://sui1mainnet-rpc.chainode.tech",
        "https://sui-rpc.publicnode.com",
    ],
    "testnet": [
        "https://fullnode.testnet.sui.io:443",
        "https://testnet.suiet.app",
        "https://rpc-testnet.suiscan.xyz",
        "https://sui-testnet-endpoint.blockvision.org",
        "https://sui-testnet.public.blastapi.io",
    ],
    "devnet": [
        "https://fullnode.devnet.sui.io:443",
    ],
    "localnet": [
        "http://127.0.0.1:9000",
    ],
}

# =============================================================================
# TEST PARAMETERS
# =============================================================================

# Rounds per test; round 0 absorbs DNS/TLS setup and is discarded
NUM_ROUNDS: int = int(os.getenv("NUM_ROUNDS", "11"))

DEFAULT_TEST_TYPE: str = "multiGetObjects"

# Objects requested per multiGetObjects probe
MULTI_GET_OBJECT_COUNT: int = 20

# Percentiles reported per endpoint
P50: float = 0.5
P90: float = 0.9

# =============================================================================
# TRANSPORT CONFIGURATION
# =============================================================================

REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))
CONNECT_TIMEOUT_SECONDS: float = float(os.getenv("CONNECT_TIMEOUT_SECONDS", "5"))
MAX_CONNECTIONS: int = int(os.getenv("MAX_CONNECTIONS", "100"))

HTTP_SUCCESS_STATUS: int = 200

# =============================================================================
# HISTORY AND HEALTH PARAMETERS
# =============================================================================

HISTORY_CAPACITY: int = 10  # Rolling window of aggregate averages per endpoint
RELIABILITY_WINDOW: int = 20  # Outcomes considered for reliability
ERROR_LOG_CAPACITY: int = 50  # Error events kept per endpoint

HEALTH_FAILURE_PENALTY: int = 20  # Score points removed on a failed probe
LATENCY_CEILING_MS: float = 2000.0  # Latency at which the latency factor reaches 0
RELIABILITY_WEIGHT: float = 0.7
LATENCY_WEIGHT: float = 0.3
INITIAL_HEALTH_SCORE: int = 100

# =============================================================================
# SCHEDULING
# =============================================================================

AUTO_REPEAT_SECONDS: float = float(os.getenv("AUTO_REPEAT_SECONDS", "60"))
HEALTH_CHECK_INTERVAL_SECONDS: float = float(os.getenv("HEALTH_CHECK_INTERVAL_SECONDS", "30"))

# =============================================================================
# OBSERVABILITY
# =============================================================================

METRICS_PORT: int = int(os.getenv("METRICS_PORT", "9100"))

# =============================================================================
# CLI DEFAULTS
# =============================================================================

DEFAULT_PLOTS_DIR: str = "plots"
