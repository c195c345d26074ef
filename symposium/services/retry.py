from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


@dataclass
class RetryOutcome(Generic[T]):
    result: T
    attempts: int
    aborted: bool = False


class RetryPolicy:
    """Fixed-delay retry applied uniformly to one data source."""

    def __init__(
        self,
        max_attempts: int = 1,
        delay_sec: float = 0.0,
        *,
        sleep_fn: Callable[[float], None] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if delay_sec < 0:
            raise ValueError("delay_sec must be >= 0")
        self.max_attempts = max_attempts
        self.delay_sec = delay_sec
        self._sleep_fn = sleep_fn

    def _wait(self, abort_event: threading.Event | None) -> bool:
        """Sleep between attempts; return False when aborted meanwhile."""
        if self._sleep_fn is not None:
            self._sleep_fn(self.delay_sec)
            return not (abort_event is not None and abort_event.is_set())
        if abort_event is None:
            time.sleep(self.delay_sec)
            return True
        return not abort_event.wait(self.delay_sec)

    def run(
        self,
        operation: Callable[[], T],
        *,
        should_retry: Callable[[T], bool],
        abort_event: threading.Event | None = None,
    ) -> RetryOutcome[T]:
        result = operation()
        attempts = 1
        while attempts < self.max_attempts and should_retry(result):
            if abort_event is not None and abort_event.is_set():
                return RetryOutcome(result, attempts, aborted=True)
            if self.delay_sec > 0 and not self._wait(abort_event):
                return RetryOutcome(result, attempts, aborted=True)
            result = operation()
            attempts += 1
        return RetryOutcome(result, attempts)
