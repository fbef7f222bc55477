from __future__ import annotations

import logging
from collections import deque
from typing import Optional

from easter_eggs.models import Notification

logger = logging.getLogger(__name__)

TOAST_HISTORY_LIMIT = 20


class ToastQueue:
    """Keeps the most recent toasts and logs each one as it is shown."""

    def __init__(self, limit: int = TOAST_HISTORY_LIMIT):
        self._toasts: deque[Notification] = deque(maxlen=limit)

    def __call__(self, notification: Notification) -> None:
        self.show(notification)

    def show(self, notification: Notification) -> None:
        logger.info("[toast] %s: %s", notification.title, notification.description)
        self._toasts.append(notification)

    @property
    def toasts(self) -> list[Notification]:
        return list(self._toasts)

    @property
    def latest(self) -> Optional[Notification]:
        return self._toasts[-1] if self._toasts else None

    def clear(self) -> None:
        self._toasts.clear()
