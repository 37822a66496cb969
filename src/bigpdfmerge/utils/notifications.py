"""
BigPdfMerge - User Notifications

Every bulk operation reports its outcome as a short, human-readable message:
successes carry a count, failures name the file and page involved. A
``Notifier`` keeps these messages in order, forwards them to any front end
that subscribed, and mirrors each one into the application log.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from bigpdfmerge.utils.logger import logger


class NotificationLevel(Enum):
    """Severity of a user notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_METHODS = {
    NotificationLevel.SUCCESS: logger.info,
    NotificationLevel.INFO: logger.info,
    NotificationLevel.WARNING: logger.warning,
    NotificationLevel.ERROR: logger.error,
}


@dataclass(frozen=True)
class Notification:
    """A single message shown to the user.

    Attributes:
        level: Severity of the message
        message: Already translated, human-readable text
    """

    level: NotificationLevel
    message: str


@dataclass
class Notifier:
    """Collects notifications and fans them out to subscribers."""

    history: list[Notification] = field(default_factory=list)
    _subscribers: list[Callable[[Notification], None]] = field(default_factory=list, repr=False)

    def subscribe(self, callback: Callable[[Notification], None]) -> None:
        """Register a callback invoked for every new notification."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Notification], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        """Record, log and dispatch a notification.

        Args:
            level: Severity of the message
            message: Human-readable text

        Returns:
            The recorded notification
        """
        notification = Notification(level=level, message=message)
        self.history.append(notification)
        _LOG_METHODS[level](message)
        for callback in list(self._subscribers):
            callback(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, message)

    def messages(self, level: NotificationLevel | None = None) -> list[str]:
        """Return recorded message texts, optionally filtered by level."""
        return [n.message for n in self.history if level is None or n.level is level]

    def clear(self) -> None:
        self.history.clear()
