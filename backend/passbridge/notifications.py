"""Transient, user-visible notices."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .logging import get_logger

logger = get_logger("notices")

MAX_NOTICES = 50


@dataclass
class Notice:
    message: str
    level: Literal["info", "error"] = "info"
    at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {"message": self.message, "level": self.level, "at": self.at.isoformat()}


class Notifier:
    """Keeps the most recent notices for the host to display."""

    def __init__(self, maxlen: int = MAX_NOTICES):
        self._notices: deque[Notice] = deque(maxlen=maxlen)

    def notify(self, message: str, level: Literal["info", "error"] = "info") -> Notice:
        notice = Notice(message=message, level=level)
        self._notices.append(notice)
        if level == "error":
            logger.warning(message)
        else:
            logger.info(message)
        return notice

    def recent(self, limit: int = MAX_NOTICES) -> list[Notice]:
        if limit <= 0:
            return []
        return list(self._notices)[-limit:]

    def clear(self) -> None:
        self._notices.clear()
