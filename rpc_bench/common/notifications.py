"""
Notification sinks for terminal run and sweep outcomes.
"""

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

SEVERITY_SUCCESS = "success"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    severity: str = SEVERITY_SUCCESS


class LoggingNotifier:
    """Writes notifications to the log."""

    def notify(self, notification: Notification) -> None:
        if notification.severity == SEVERITY_ERROR:
            logger.error(f"{notification.title}: {notification.description}")
        elif notification.severity == SEVERITY_WARNING:
            logger.warning(f"{notification.title}: {notification.description}")
        else:
            logger.info(f"{notification.title}: {notification.description}")


class CollectingNotifier(LoggingNotifier):
    """Logs notifications and keeps them for later inspection."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        super().notify(notification)
        self.notifications.append(notification)
