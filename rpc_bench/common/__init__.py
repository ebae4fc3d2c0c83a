"""
Common utilities for the RPC speed test.
"""

from .endpoints import Endpoint, EndpointSet
from .notifications import Notification, LoggingNotifier, CollectingNotifier

__all__ = ['Endpoint', 'EndpointSet', 'Notification', 'LoggingNotifier', 'CollectingNotifier']
