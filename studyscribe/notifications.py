"""
User-facing notifications.

Fire-and-forget success / error / info messages. Nothing is persisted and
nothing can be queried back; the console notifier simply prints a toast.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notifier(ABC):
    """Base notification channel. Subclasses implement notify()."""

    @abstractmethod
    def notify(self, level: NotificationLevel, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        self.notify(NotificationLevel.SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(NotificationLevel.ERROR, message)

    def info(self, message: str) -> None:
        self.notify(NotificationLevel.INFO, message)


class ConsoleNotifier(Notifier):
    """Prints notifications as one-line toasts on a rich console."""

    STYLES = {
        NotificationLevel.SUCCESS: ("green", "✓"),
        NotificationLevel.ERROR: ("red", "✗"),
        NotificationLevel.INFO: ("cyan", "•"),
    }

    def __init__(self, console: Console):
        self.console = console

    def notify(self, level: NotificationLevel, message: str) -> None:
        style, icon = self.STYLES[level]
        self.console.print(f"[{style}]{icon} {escape(message)}[/{style}]")
        logger.debug(f"Notification ({level.value}): {message}")
