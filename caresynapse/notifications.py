# -*- coding: utf-8 -*-
"""Transient, auto-dismissing user notifications (one visible at a time)."""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel

from .config import settings


class NotificationKind(str, Enum):
    success = "success"
    error = "error"
    info = "info"
    warning = "warning"


class Notification(BaseModel):
    kind: NotificationKind
    message: str
    created_at: float
    expires_at: float


class Notifier:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._current: Optional[Notification] = None

    def notify(self, kind: NotificationKind, message: str, duration: Optional[float] = None) -> Notification:
        now = self._clock()
        seconds = settings.notice_seconds if duration is None else duration
        self._current = Notification(kind=kind, message=message, created_at=now, expires_at=now + seconds)
        return self._current

    def current(self) -> Optional[Notification]:
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._current = None
        return self._current

    def dismiss(self) -> None:
        self._current = None
