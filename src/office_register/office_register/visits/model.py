from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import format_duration, to_iso


@dataclass(frozen=True)
class VisitLogEntry:
    """Domain entity: one sign-in/sign-out pair. ``sign_out_time`` None means open."""

    visit_id: int
    member_id: int
    sign_in_time: datetime
    sign_out_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.sign_out_time is None


@dataclass(frozen=True)
class VisitRecord:
    """What sign-in/sign-out hand back to the caller."""

    visit_id: int
    member_id: int
    member_name: str
    sign_in_time: datetime
    sign_out_time: Optional[datetime] = None
    duration: Optional[timedelta] = None

    def to_dict(self) -> dict:
        return {
            "id": self.visit_id,
            "member_id": self.member_id,
            "member_name": self.member_name,
            "sign_in_time": to_iso(self.sign_in_time),
            "sign_out_time": to_iso(self.sign_out_time),
            "duration": format_duration(self.duration) if self.duration is not None else None,
            "duration_seconds": int(self.duration.total_seconds()) if self.duration is not None else None,
        }
