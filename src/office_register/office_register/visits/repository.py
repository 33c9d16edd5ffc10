from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..events.feed import ChangeCallback, Subscription
from .model import VisitLogEntry


class VisitLogRepository(Protocol):
    def insert(self, *, member_id: int, sign_in_time: datetime) -> int:
        """Open a visit. Raises ConflictError if the member already has one open."""
        raise NotImplementedError

    def find_open_by_member(self, member_id: int) -> Optional[VisitLogEntry]:
        raise NotImplementedError

    def close(self, *, visit_id: int, sign_out_time: datetime) -> bool:
        """Set the sign-out time; False when the visit was not open anymore."""
        raise NotImplementedError

    def list_open(self) -> Sequence[VisitLogEntry]:
        raise NotImplementedError

    def list_closed_since(self, since: datetime) -> Sequence[VisitLogEntry]:
        """Closed visits whose sign-out time is at or after ``since``."""
        raise NotImplementedError

    def count_sign_ins_since(self, since: datetime) -> int:
        raise NotImplementedError

    def latest_change_marker(self) -> Any:
        """Cheap value that changes whenever the table changes (used for polling)."""
        raise NotImplementedError

    def subscribe(self, on_change: ChangeCallback) -> Subscription:
        raise NotImplementedError
