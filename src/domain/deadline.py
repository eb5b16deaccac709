from __future__ import annotations

import math
import threading
import time
from types import TracebackType
from typing import Callable

Clock = Callable[[], float]


class Deadline:
    """Absolute expiry instant plus a cancellation signal.

    Deadlines form a chain: a child never expires later than its parent and is
    cancelled whenever any ancestor is. Cancelling a child leaves the parent
    untouched. Instants come from a monotonic clock, so ``expires_at`` is only
    comparable with values of that same clock.

    Used as a context manager the deadline cancels itself on exit, which ends
    whatever is still bound to it once the owning call returns.
    """

    def __init__(self, expires_at: float, *, parent: Deadline | None = None, clock: Clock = time.monotonic) -> None:
        if parent is not None:
            expires_at = min(expires_at, parent.expires_at)
        self.expires_at = expires_at
        self.parent = parent
        self._clock = clock
        self._cancelled = threading.Event()

    @classmethod
    def after(cls, seconds: float, *, clock: Clock = time.monotonic) -> Deadline:
        return cls(clock() + seconds, clock=clock)

    @classmethod
    def unbounded(cls, *, clock: Clock = time.monotonic) -> Deadline:
        return cls(math.inf, clock=clock)

    def child(self, seconds: float) -> Deadline:
        return Deadline(self._clock() + seconds, parent=self, clock=self._clock)

    def now(self) -> float:
        return self._clock()

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self.parent is not None and self.parent.cancelled

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def cancel(self) -> None:
        self._cancelled.set()

    def __enter__(self) -> Deadline:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.4f}s, cancelled={self.cancelled})"


__all__ = ["Clock", "Deadline"]
