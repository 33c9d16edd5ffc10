from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ..core.enums import VisitChangeKind
from ..logging.utils import get_app_logger

logger = get_app_logger(__name__)

JOIN_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True)
class VisitChange:
    """One insert/update on the visit log. ``visit_id`` is None for polled changes."""

    kind: VisitChangeKind
    visit_id: Optional[int]
    member_id: Optional[int]
    at: datetime


ChangeCallback = Callable[[VisitChange], None]


class Subscription:
    """Cancellation handle returned by ``ChangeFeed.subscribe``."""

    def __init__(self, feed: "ChangeFeed", token: int):
        self._feed = feed
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._feed._unsubscribe(self._token)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()


class ChangeFeed:
    """In-process change notifications for the visit log."""

    def __init__(self):
        self._lock = threading.Lock()
        self._callbacks: Dict[int, ChangeCallback] = {}
        self._next_token = 0

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        with self._lock:
            self._next_token += 1
            token = self._next_token
            self._callbacks[token] = callback
            count = len(self._callbacks)
        self._on_subscribers_changed(count)
        return Subscription(self, token)

    def _unsubscribe(self, token: int) -> None:
        with self._lock:
            self._callbacks.pop(token, None)
            count = len(self._callbacks)
        self._on_subscribers_changed(count)

    def publish(self, change: VisitChange) -> None:
        with self._lock:
            callbacks = list(self._callbacks.values())
        for callback in callbacks:
            try:
                callback(change)
            except Exception:
                logger.exception(f"change_callback_failed | kind={change.kind.value} visit_id={change.visit_id}")

    def _on_subscribers_changed(self, count: int) -> None:
        pass


class PollingChangeFeed(ChangeFeed):
    """Change feed that also polls a store marker while anyone is subscribed.

    Catches writes made by other processes (other workers, admin tools) that the
    in-process ``publish`` never sees.
    """

    def __init__(self, marker_source: Callable[[], Any], *, interval_seconds: float = 5.0, clock: Callable[[], datetime] = datetime.now):
        super().__init__()
        self._marker_source = marker_source
        self._interval = float(interval_seconds)
        self._clock = clock
        self._last_marker: Any = None
        self._thread: Optional[threading.Thread] = None
        self._stop: Optional[threading.Event] = None
        self._thread_lock = threading.Lock()
        self._marker_lock = threading.Lock()

    def poll_once(self, stop: Optional[threading.Event] = None) -> bool:
        """Read the marker once; publish and return True when it moved.

        A poller whose ``stop`` is already set never touches the baseline.
        """
        try:
            marker = self._marker_source()
        except Exception:
            logger.exception("change_poll_failed")
            return False

        with self._marker_lock:
            if stop is not None and stop.is_set():
                return False
            previous, self._last_marker = self._last_marker, marker
        if previous is None or marker == previous:
            return False
        self.publish(VisitChange(kind=VisitChangeKind.UPDATE, visit_id=None, member_id=None, at=self._clock()))
        return True

    def _run(self, stop: threading.Event) -> None:
        while not stop.wait(self._interval):
            self.poll_once(stop)

    def _on_subscribers_changed(self, count: int) -> None:
        stopped: Optional[threading.Thread] = None
        with self._thread_lock:
            if count and self._thread is None:
                self._stop = threading.Event()
                self.poll_once()
                self._thread = threading.Thread(target=self._run, args=(self._stop,), name="visit-log-poller", daemon=True)
                self._thread.start()
                logger.info(f"change_poller_started | interval={self._interval}")
            elif not count and self._thread is not None:
                self._stop.set()
                with self._marker_lock:
                    self._last_marker = None
                stopped, self._thread, self._stop = self._thread, None, None
                logger.info("change_poller_stopped")

        # cancel() may run on the poller itself, from inside a callback
        if stopped is not None and stopped is not threading.current_thread():
            stopped.join(timeout=JOIN_TIMEOUT_SECONDS)
