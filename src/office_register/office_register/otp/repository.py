from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import OtpRecord


class OtpRepository(Protocol):
    def upsert(self, *, email: str, code: str, expires_at: datetime, created_at: datetime) -> None:
        """Insert or replace the record for ``email``."""
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[OtpRecord]:
        raise NotImplementedError

    def delete_by_email(self, email: str, *, code: Optional[str] = None) -> bool:
        """Delete the record; with ``code`` only if it still holds that code."""
        raise NotImplementedError
