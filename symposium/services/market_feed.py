from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Callable

from symposium.schemas.market import MarketSnapshot
from symposium.services.market_data import MarketDataOrchestrator

Subscriber = Callable[[MarketSnapshot], None]


class FeedState(str, Enum):
    UNINITIALIZED = "UNINITIALIZED"
    LOADING = "LOADING"
    CONNECTED = "CONNECTED"
    DEGRADED = "DEGRADED"


class MarketFeed:
    """Periodic market snapshot refresh with observer fan-out.

    Concurrent ``refresh()`` calls share one in-flight cycle. The cached
    snapshot is replaced as a whole at the end of each cycle, and observers
    only ever receive deep copies of it.
    """

    def __init__(
        self,
        orchestrator: MarketDataOrchestrator,
        *,
        interval_sec: float = 10.0,
        degraded_threshold: int = 3,
        offline_cooldown_sec: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.orchestrator = orchestrator
        self.interval_sec = interval_sec
        self.degraded_threshold = degraded_threshold
        self.offline_cooldown_sec = offline_cooldown_sec
        self._clock = clock

        self._lock = threading.Lock()
        self._subscribers: list[Subscriber] = []
        self._snapshot: MarketSnapshot | None = None
        self._snapshot_at: float | None = None
        self._state = FeedState.UNINITIALIZED
        self._inflight: Future | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="market-refresh")
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

        self._consecutive_degraded = 0
        self._offline_until = 0.0
        self.refreshes = 0
        self.coalesced_refreshes = 0
        self.deliveries = 0
        self.callback_errors = 0
        self.offline_cycles = 0

    @property
    def state(self) -> FeedState:
        with self._lock:
            return self._state

    def latest(self) -> MarketSnapshot | None:
        with self._lock:
            snapshot = self._snapshot
        return snapshot.model_copy(deep=True) if snapshot is not None else None

    def recent(self, max_age_sec: float) -> MarketSnapshot | None:
        """Cached snapshot if the last cycle finished within ``max_age_sec``."""
        with self._lock:
            snapshot = self._snapshot
            stored_at = self._snapshot_at
        if snapshot is None or stored_at is None or self._clock() - stored_at > max_age_sec:
            return None
        return snapshot.model_copy(deep=True)

    def connection_status(self) -> str:
        state = self.state
        if state == FeedState.CONNECTED:
            return "LIVE"
        if state == FeedState.LOADING:
            return "SYNC"
        return "OFFLINE"

    # ------------------------------------------------------------------
    # observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        with self._lock:
            self._subscribers.append(callback)
            cached = self._snapshot

        if cached is not None:
            self._deliver(callback, cached)
        self.start()

        def _unsubscribe() -> None:
            self.unsubscribe(callback)

        return _unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
            idle = not self._subscribers
        if idle:
            self.stop()

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _deliver(self, callback: Subscriber, snapshot: MarketSnapshot) -> None:
        try:
            callback(snapshot.model_copy(deep=True))
        except Exception as exc:
            with self._lock:
                self.callback_errors += 1
            print(f"[FEED][subscriber_error] error={exc}", flush=True)
            return
        with self._lock:
            self.deliveries += 1

    # ------------------------------------------------------------------
    # refresh cycle
    # ------------------------------------------------------------------

    def refresh(self) -> Future:
        """Start a refresh cycle, or join the one already running."""
        with self._lock:
            if self._inflight is not None:
                self.coalesced_refreshes += 1
                return self._inflight
            self.refreshes += 1
            if self._state == FeedState.UNINITIALIZED:
                self._state = FeedState.LOADING
            self._inflight = self._executor.submit(self._run_cycle)
            return self._inflight

    def _produce_snapshot(self) -> MarketSnapshot:
        now = self._clock()
        if now < self._offline_until:
            self.offline_cycles += 1
            return self.orchestrator.fallback_snapshot(source="offline-fallback")

        snapshot = self.orchestrator.fetch_all()
        if snapshot.fallback:
            self._consecutive_degraded += 1
            if self._consecutive_degraded >= self.degraded_threshold:
                self._offline_until = now + self.offline_cooldown_sec
                print(
                    f"[FEED][offline_mode] degraded_cycles={self._consecutive_degraded} "
                    f"cooldown_sec={self.offline_cooldown_sec}",
                    flush=True,
                )
                self._consecutive_degraded = 0
        else:
            self._consecutive_degraded = 0
        return snapshot

    def _run_cycle(self) -> MarketSnapshot:
        try:
            snapshot = self._produce_snapshot()
        except Exception as exc:
            print(f"[FEED][cycle_error] error={exc}", flush=True)
            try:
                snapshot = self.orchestrator.fallback_snapshot(source="emergency-fallback")
            except Exception:
                with self._lock:
                    self._inflight = None
                    self._state = FeedState.DEGRADED
                    cached = self._snapshot
                if cached is None:
                    raise
                return cached.model_copy(deep=True)

        with self._lock:
            self._snapshot = snapshot
            self._snapshot_at = self._clock()
            self._state = FeedState.DEGRADED if snapshot.fallback else FeedState.CONNECTED
            self._inflight = None
            subscribers = list(self._subscribers)

        for callback in subscribers:
            self._deliver(callback, snapshot)
        return snapshot.model_copy(deep=True)

    # ------------------------------------------------------------------
    # interval worker
    # ------------------------------------------------------------------

    def _loop(self, stop_event: threading.Event) -> None:
        self.refresh()
        while not stop_event.wait(self.interval_sec):
            self.refresh()

    def start(self) -> None:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._loop,
                args=(self._stop_event,),
                daemon=True,
                name="market-feed",
            )
            thread = self._thread
        print(f"[FEED][worker_start] interval_sec={self.interval_sec}", flush=True)
        thread.start()

    def stop(self) -> None:
        with self._lock:
            self._stop_event.set()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread() and thread.is_alive():
            thread.join(timeout=1.0)
            print("[FEED][worker_stop]", flush=True)

    def close(self) -> None:
        self.stop()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def metrics(self) -> dict:
        with self._lock:
            snapshot = self._snapshot
            return {
                "state": self._state.value,
                "subscribers": len(self._subscribers),
                "refreshes": self.refreshes,
                "coalesced_refreshes": self.coalesced_refreshes,
                "deliveries": self.deliveries,
                "callback_errors": self.callback_errors,
                "offline_cycles": self.offline_cycles,
                "offline_mode": self._clock() < self._offline_until,
                "last_snapshot_ts": snapshot.timestamp.isoformat() if snapshot else None,
            }
