from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import VisitChangeKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..events.feed import ChangeCallback, ChangeFeed, Subscription, VisitChange
from .model import VisitLogEntry
from .repository import VisitLogRepository

_COLUMNS = "visit_id, member_id, sign_in_time, sign_out_time"


def _row_to_entry(r: dict) -> VisitLogEntry:
    return VisitLogEntry(
        visit_id=int(r["visit_id"]),
        member_id=int(r["member_id"]),
        sign_in_time=r["sign_in_time"],
        sign_out_time=r.get("sign_out_time"),
    )


class MySQLVisitLogRepository(VisitLogRepository):
    """Visit log table plus its change feed.

    Changes are published only after the statement committed.
    """

    def __init__(self, conn_factory: DatabaseConnection, feed: Optional[ChangeFeed] = None):
        self._conn_factory = conn_factory
        self._feed = feed or ChangeFeed()

    @property
    def feed(self) -> ChangeFeed:
        return self._feed

    def insert(self, *, member_id: int, sign_in_time: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO visit_logs(member_id, sign_in_time) VALUES(%s,%s)",
                (int(member_id), sign_in_time),
            )
            visit_id = int(cur.lastrowid)
        self._feed.publish(VisitChange(kind=VisitChangeKind.INSERT, visit_id=visit_id, member_id=int(member_id), at=now_local()))
        return visit_id

    def find_open_by_member(self, member_id: int) -> Optional[VisitLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM visit_logs
                WHERE member_id=%s AND sign_out_time IS NULL
                ORDER BY sign_in_time DESC
                LIMIT 1
                """,
                (int(member_id),),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def close(self, *, visit_id: int, sign_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE visit_logs
                SET sign_out_time=%s
                WHERE visit_id=%s AND sign_out_time IS NULL
                """,
                (sign_out_time, int(visit_id)),
            )
            closed = cur.rowcount > 0
        if closed:
            self._feed.publish(VisitChange(kind=VisitChangeKind.UPDATE, visit_id=int(visit_id), member_id=None, at=now_local()))
        return closed

    def list_open(self) -> Sequence[VisitLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM visit_logs WHERE sign_out_time IS NULL ORDER BY sign_in_time ASC"
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_closed_since(self, since: datetime) -> Sequence[VisitLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM visit_logs
                WHERE sign_out_time IS NOT NULL AND sign_out_time >= %s
                ORDER BY sign_out_time ASC
                """,
                (since,),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def count_sign_ins_since(self, since: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM visit_logs WHERE sign_in_time >= %s", (since,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def latest_change_marker(self) -> Any:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n, MAX(visit_id) AS last_id,
                       MAX(sign_out_time) AS last_out, SUM(sign_out_time IS NULL) AS open_n
                FROM visit_logs
                """
            )
            r = fetchone(cur) or {}
            return (r.get("n"), r.get("last_id"), r.get("last_out"), r.get("open_n"))

    def subscribe(self, on_change: ChangeCallback) -> Subscription:
        return self._feed.subscribe(on_change)
