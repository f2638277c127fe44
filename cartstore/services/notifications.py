"""
Notification sinks - one-way channels for user-facing failure messages.

The store hands failed results to a sink; sinks never acknowledge and
never raise back into the store.
"""

from typing import Protocol

from cartstore.logging import get_logger

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def error(self, message: str) -> None: ...


class LoggingNotificationSink:
    """Writes user-facing errors to the application log."""

    def __init__(self, name: str = "cartstore.notifications"):
        self._logger = get_logger(name)

    def error(self, message: str) -> None:
        self._logger.warning("User notification: %s", message)


class RecordingNotificationSink:
    """Keeps messages in memory until a UI drains them."""

    def __init__(self):
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)

    def drain(self) -> list[str]:
        """Return pending messages and forget them."""
        messages, self.messages = self.messages, []
        return messages
