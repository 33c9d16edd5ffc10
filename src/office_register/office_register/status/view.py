from __future__ import annotations

import threading
from typing import Callable, List, Optional

from ..events.feed import Subscription, VisitChange
from ..logging.utils import get_app_logger
from ..visits.repository import VisitLogRepository
from .model import MemberStatus
from .service import StatusProjection

logger = get_app_logger(__name__)

UpdateListener = Callable[[List[MemberStatus]], None]


class StatusView:
    """Live status list for one viewer.

    Owns exactly one visit-log subscription between ``open()`` and ``close()``; every
    change triggers a full re-fetch of the projection. With ``deferred=True`` the change
    only marks the view stale and the owner re-fetches on its own thread, after
    ``wait_for_change``.
    """

    def __init__(
        self,
        projection: StatusProjection,
        visits: VisitLogRepository,
        *,
        query: Optional[str] = None,
        on_update: Optional[UpdateListener] = None,
        deferred: bool = False,
    ):
        self._projection = projection
        self._visits = visits
        self._query = query
        self._listeners: List[UpdateListener] = [on_update] if on_update else []
        self._subscription: Optional[Subscription] = None
        self._rows: List[MemberStatus] = []
        self._lock = threading.Lock()
        self._deferred = deferred
        self._changed = threading.Event()

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and self._subscription.active

    @property
    def rows(self) -> List[MemberStatus]:
        with self._lock:
            return list(self._rows)

    def add_listener(self, listener: UpdateListener) -> None:
        self._listeners.append(listener)

    def open(self) -> "StatusView":
        if self.is_open:
            return self
        self._subscription = self._visits.subscribe(self._on_change)
        self.refresh()
        logger.debug("status_view_opened")
        return self

    def refresh(self) -> List[MemberStatus]:
        rows = self._projection.list_with_status(query=self._query)
        with self._lock:
            self._rows = rows
        for listener in list(self._listeners):
            listener(rows)
        return rows

    def _on_change(self, change: VisitChange) -> None:
        if not self.is_open:
            return
        if self._deferred:
            self._changed.set()
            return
        self.refresh()

    def wait_for_change(self, timeout: Optional[float] = None) -> bool:
        """Block until a change arrived since the last call; False on timeout."""
        changed = self._changed.wait(timeout)
        self._changed.clear()
        return changed

    def close(self) -> None:
        if self._subscription is None:
            return
        self._subscription.cancel()
        self._subscription = None
        logger.debug("status_view_closed")

    def __enter__(self) -> "StatusView":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
