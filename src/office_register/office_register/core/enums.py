from __future__ import annotations

from enum import Enum


class MemberCategory(str, Enum):
    """Roster category shown on the admin dashboard."""

    STAFF = "staff"
    UNDERSTUDY = "understudy"
    LAB_USER = "lab_user"

    @classmethod
    def parse(cls, value: str) -> "MemberCategory":
        v = (value or "").strip().lower().replace("-", "_")
        if v == "innovation_lab_user":
            v = cls.LAB_USER.value
        return cls(v)


class ErrorCode(str, Enum):
    """Stable failure codes surfaced to callers alongside a readable message."""

    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    CONFLICT = "CONFLICT"
    DELIVERY_FAILURE = "DELIVERY_FAILURE"
    STORE_ERROR = "STORE_ERROR"
    VALIDATION = "VALIDATION"
    UNAUTHORIZED = "UNAUTHORIZED"


class VerifyFailure(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    EXPIRED = "EXPIRED"


class VisitChangeKind(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
