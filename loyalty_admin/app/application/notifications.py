from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    text: str


Listener = Callable[[Notification | None], None]


class NotificationChannel:
    """Single-slot banner message: each emit replaces the previous one."""

    def __init__(self) -> None:
        self._current: Notification | None = None
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> Notification | None:
        return self._current

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, kind: NotificationKind | str, text: str) -> Notification:
        notification = Notification(kind=NotificationKind(kind), text=text)
        with self._lock:
            self._current = notification
        self._publish(notification)
        return notification

    def success(self, text: str) -> Notification:
        return self.emit(NotificationKind.SUCCESS, text)

    def error(self, text: str) -> Notification:
        return self.emit(NotificationKind.ERROR, text)

    def clear(self) -> None:
        with self._lock:
            if self._current is None:
                return
            self._current = None
        self._publish(None)

    def _publish(self, notification: Notification | None) -> None:
        for listener in list(self._listeners):
            listener(notification)
