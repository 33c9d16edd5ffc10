from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import MemberCategory


@dataclass(frozen=True)
class Member:
    """Domain entity: a roster entry allowed to sign in to the office.

    Note: Plain data object, no DB access here.
    """

    member_id: int
    name: str
    email: str
    category: MemberCategory
    phone_number: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.member_id,
            "name": self.name,
            "email": self.email,
            "category": self.category.value,
            "phone_number": self.phone_number,
            "role": self.role,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(timespec="seconds") if self.created_at else None,
        }
