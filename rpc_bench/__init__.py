"""
Sui RPC speed test: latency ranking, rolling history and endpoint health.
"""

__version__ = "0.1.0"
