from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import OtpRecord
from .repository import OtpRepository


class MySQLOtpRepository(OtpRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, email: str, code: str, expires_at: datetime, created_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO otp_codes(email, code, expires_at, created_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE code=VALUES(code), expires_at=VALUES(expires_at), created_at=VALUES(created_at)
                """,
                (email, code, expires_at, created_at),
            )

    def get_by_email(self, email: str) -> Optional[OtpRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT email, code, expires_at, created_at FROM otp_codes WHERE email=%s",
                (email,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return OtpRecord(
                email=r["email"],
                code=str(r["code"]),
                expires_at=r["expires_at"],
                created_at=r["created_at"],
            )

    def delete_by_email(self, email: str, *, code: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if code is None:
                cur.execute("DELETE FROM otp_codes WHERE email=%s", (email,))
            else:
                cur.execute("DELETE FROM otp_codes WHERE email=%s AND code=%s", (email, code))
            return cur.rowcount > 0
