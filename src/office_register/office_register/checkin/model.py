from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class MemberSession:
    """Persisted between requests while a member is signed in."""

    email: str
    name: str
    member_id: int
    visit_id: int
    sign_in_time: datetime

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "name": self.name,
            "member_id": self.member_id,
            "visit_id": self.visit_id,
            "sign_in_time": to_iso(self.sign_in_time),
            "is_signed_in": True,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Optional["MemberSession"]:
        try:
            return cls(
                email=str(data["email"]),
                name=str(data.get("name", "")),
                member_id=int(data["member_id"]),
                visit_id=int(data["visit_id"]),
                sign_in_time=datetime.fromisoformat(str(data["sign_in_time"])),
            )
        except (KeyError, TypeError, ValueError):
            return None
