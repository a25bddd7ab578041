"""Session-wide, dismissible notice shown to the user."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    message: str
    raised_at: datetime


class SessionNotices:
    """Holds the latest session-wide notice until it is dismissed."""

    def __init__(self) -> None:
        self._current: Notice | None = None

    @property
    def current(self) -> Notice | None:
        return self._current

    def publish(self, message: str) -> Notice:
        notice = Notice(message=message, raised_at=datetime.now(UTC))
        self._current = notice
        logger.warning("Notice: %s", message)
        return notice

    def dismiss(self) -> None:
        self._current = None
