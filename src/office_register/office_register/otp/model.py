from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import VerifyFailure


@dataclass(frozen=True)
class OtpRecord:
    """The single live passcode for a normalized email."""

    email: str
    code: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class IssueResult:
    email: str
    member_name: str
    delivered: bool
    expires_at: datetime
    code: str
    message: str

    def to_dict(self, *, include_code: bool = False) -> dict:
        out = {
            "success": True,
            "email": self.email,
            "member_name": self.member_name,
            "delivered": self.delivered,
            "expires_at": self.expires_at.isoformat(timespec="seconds"),
            "message": self.message,
        }
        if include_code:
            out["otp_code"] = self.code
        return out


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    reason: Optional[VerifyFailure]
    message: str
