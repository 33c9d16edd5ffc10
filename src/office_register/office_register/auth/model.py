from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Admin:
    admin_id: int
    email: str
    full_name: str
    password_hash: str
    is_active: bool = True


@dataclass(frozen=True)
class AdminSession:
    """What we store into the session after admin login."""

    admin_id: int
    email: str
    full_name: str

    def to_dict(self) -> dict:
        return {"admin_id": self.admin_id, "email": self.email, "full_name": self.full_name}

    @classmethod
    def from_dict(cls, data: dict) -> "AdminSession":
        return cls(admin_id=int(data["admin_id"]), email=str(data["email"]), full_name=str(data.get("full_name", "")))
