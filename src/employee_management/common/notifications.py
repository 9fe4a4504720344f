from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Sink for user-facing notifications (toasts)."""

    def notify(self, message: str, level: str = "info") -> None:
        raise NotImplementedError


class LoggingNotifier:
    """Default sink when no UI is attached: write notifications to the log."""

    def notify(self, message: str, level: str = "info") -> None:
        logger.info("[%s] %s", level, message)
