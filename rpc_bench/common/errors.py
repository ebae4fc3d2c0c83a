"""
Exception types for the RPC speed test.
"""


class RpcBenchError(Exception):
    """Base class for all speed test errors."""


class ValidationError(RpcBenchError):
    """Raised before any round runs when the test cannot start (e.g. no endpoint enabled)."""


class ProbeError(RpcBenchError):
    """A single request against a single endpoint failed."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{endpoint}: {message}")
        self.endpoint = endpoint
        self.message = message


class RoundError(RpcBenchError):
    """The dispatch of a whole round failed."""


class RunError(RpcBenchError):
    """A test run failed outside of round isolation."""


class RunInProgressError(RpcBenchError):
    """A test run was requested while another one is still active."""


class RunCancelledError(RpcBenchError):
    """A test run was cancelled between rounds."""
