"""
User-visible outcome notices for POS terminals.

A NotificationSink receives the success, error and info messages produced
while an order is submitted. Terminals plug in their own sink; the default
RecordingNotificationSink keeps the notices so API responses can return them.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from django.utils import timezone

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
ERROR = "ERROR"
INFO = "INFO"


@dataclass(frozen=True)
class Notice:
    level: str
    message: str
    created_at: object = field(default_factory=timezone.now)

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message}


class NotificationSink:
    """Receiver for outcome notices."""

    def show_success(self, message: str):
        raise NotImplementedError

    def show_error(self, message: str):
        raise NotImplementedError

    def show_info(self, message: str):
        raise NotImplementedError


class RecordingNotificationSink(NotificationSink):
    """Sink that logs every notice and keeps it in memory."""

    def __init__(self):
        self.notices: List[Notice] = []

    def _record(self, level, message):
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        return notice

    def show_success(self, message: str):
        logger.info(f"Notice: {message}")
        return self._record(SUCCESS, message)

    def show_error(self, message: str):
        logger.warning(f"Error notice: {message}")
        return self._record(ERROR, message)

    def show_info(self, message: str):
        logger.info(f"Info notice: {message}")
        return self._record(INFO, message)

    def messages(self, level=None) -> List[str]:
        return [notice.message for notice in self.notices if level is None or notice.level == level]

    def clear(self):
        self.notices = []
