from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def require_email(value: str, field_name: str = "Email") -> str:
    email = normalize_email(require_non_empty(value, field_name))
    if not _EMAIL_RE.match(email):
        raise ValidationError("Enter a valid email address")
    return email


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None
