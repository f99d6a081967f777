"""
Notification banner state.

A notification carries its own dismissal deadline. Showing a new one replaces
the old one and restarts the countdown, so an earlier message can never clear
a later one.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

KINDS = ("success", "error")
DEFAULT_DURATION = 3.0


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str
    expires_at: float


class Notifier:
    def __init__(self, duration: float = DEFAULT_DURATION, clock: Callable[[], float] = time.monotonic):
        if duration <= 0:
            raise ValueError("Notification duration must be positive")
        self.duration = float(duration)
        self._clock = clock
        self._current: Optional[Notification] = None

    def show(self, message: str, kind: str = "success") -> Notification:
        if kind not in KINDS:
            raise ValueError(f"Unknown notification kind: {kind!r}")
        self._current = Notification(message=message, kind=kind, expires_at=self._clock() + self.duration)
        return self._current

    def success(self, message: str) -> Notification:
        return self.show(message, "success")

    def error(self, message: str) -> Notification:
        return self.show(message, "error")

    def current(self) -> Optional[Notification]:
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._current = None
        return self._current

    def remaining(self) -> float:
        note = self.current()
        if note is None:
            return 0.0
        return max(0.0, note.expires_at - self._clock())

    def dismiss(self) -> None:
        self._current = None
