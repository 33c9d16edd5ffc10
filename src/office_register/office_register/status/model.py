from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import format_duration, to_iso
from ..members.model import Member


@dataclass(frozen=True)
class MemberStatus:
    """Read-model: roster row joined with the member's visit state."""

    member: Member
    is_signed_in: bool
    current_visit_id: Optional[int] = None
    current_sign_in_time: Optional[datetime] = None
    current_sign_out_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        out = self.member.to_dict()
        out.update(
            {
                "is_signed_in": self.is_signed_in,
                "current_visit_id": self.current_visit_id,
                "current_sign_in_time": to_iso(self.current_sign_in_time),
                "current_sign_out_time": to_iso(self.current_sign_out_time),
            }
        )
        return out


@dataclass(frozen=True)
class SignedInMember:
    member_id: int
    name: str
    email: str
    category: str
    sign_in_time: datetime
    duration: timedelta

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "name": self.name,
            "email": self.email,
            "category": self.category,
            "sign_in_time": to_iso(self.sign_in_time),
            "duration": format_duration(self.duration),
        }


@dataclass(frozen=True)
class DashboardStats:
    total_members: int
    active_members: int
    today_sign_ins: int
    currently_in_office: int

    def to_dict(self) -> dict:
        return {
            "total_members": self.total_members,
            "active_members": self.active_members,
            "today_sign_ins": self.today_sign_ins,
            "currently_in_office": self.currently_in_office,
        }
