from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MemberCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Member
from .repository import MemberRepository

_COLUMNS = "member_id, name, email, category, phone_number, role, is_active, created_at"


def _row_to_member(row: dict) -> Member:
    return Member(
        member_id=int(row["member_id"]),
        name=row["name"],
        email=row["email"],
        category=MemberCategory.parse(row["category"]),
        phone_number=row.get("phone_number"),
        role=row.get("role"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id=%s", (int(member_id),))
            row = fetchone(cur)
            return _row_to_member(row) if row else None

    def get_by_email(self, email: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE LOWER(email)=LOWER(%s)", (email,))
            row = fetchone(cur)
            return _row_to_member(row) if row else None

    def list_all(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members ORDER BY name ASC")
            return [_row_to_member(r) for r in fetchall(cur)]

    def create_member(
        self,
        *,
        name: str,
        email: str,
        category: MemberCategory,
        phone_number: Optional[str],
        role: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO members(name, email, category, phone_number, role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email, category.value, phone_number, role),
            )
            return int(cur.lastrowid)

    def set_active(self, member_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE members SET is_active=%s WHERE member_id=%s",
                (1 if is_active else 0, int(member_id)),
            )
            return cur.rowcount > 0
