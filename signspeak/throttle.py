# signspeak/throttle.py
import time
from typing import Any, Callable, Optional


class Throttle:
    """Fires at most once per `interval` seconds."""

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic):
        self.interval = float(interval)
        self.clock = clock
        self.last: Optional[float] = None

    def ready(self, now: Optional[float] = None) -> bool:
        now = self.clock() if now is None else now
        if self.last is not None and now - self.last < self.interval:
            return False
        self.last = now
        return True

    def reset(self):
        self.last = None


class HeldValue:
    """A value that expires `ttl` seconds after it was set."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl)
        self.clock = clock
        self._value: Any = None
        self._set_at: Optional[float] = None

    def set(self, value: Any, now: Optional[float] = None):
        self._value = value
        self._set_at = self.clock() if now is None else now

    def get(self, now: Optional[float] = None) -> Any:
        if self._set_at is None:
            return None
        now = self.clock() if now is None else now
        if now - self._set_at >= self.ttl:
            self.clear()
            return None
        return self._value

    def clear(self):
        self._value = None
        self._set_at = None
