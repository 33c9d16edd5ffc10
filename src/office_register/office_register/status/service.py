from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import now_local, start_of_day
from ..members.model import Member
from ..members.repository import MemberRepository
from ..visits.model import VisitLogEntry
from ..visits.repository import VisitLogRepository
from .model import DashboardStats, MemberStatus, SignedInMember


def _matches(member: Member, needle: str) -> bool:
    hay = f"{member.name} {member.email} {member.role or ''} {member.category.value}".lower()
    return needle in hay


def sort_for_display(rows: Sequence[MemberStatus]) -> List[MemberStatus]:
    """Signed-in first, then active, then name (stable)."""
    return sorted(
        rows,
        key=lambda s: (not s.is_signed_in, not s.member.is_active, s.member.name.casefold()),
    )


class StatusProjection:
    """Computed "who is in the office" view; nothing here is persisted."""

    def __init__(self, members: MemberRepository, visits: VisitLogRepository):
        self._members = members
        self._visits = visits

    def list_with_status(self, *, now: Optional[datetime] = None, query: Optional[str] = None) -> List[MemberStatus]:
        now = now or now_local()
        members = self._members.list_all()

        open_by_member: Dict[int, VisitLogEntry] = {}
        for entry in self._visits.list_open():
            current = open_by_member.get(entry.member_id)
            if current is None or entry.sign_in_time > current.sign_in_time:
                open_by_member[entry.member_id] = entry

        last_closed_today: Dict[int, VisitLogEntry] = {}
        for entry in self._visits.list_closed_since(start_of_day(now)):
            current = last_closed_today.get(entry.member_id)
            if current is None or entry.sign_out_time > current.sign_out_time:
                last_closed_today[entry.member_id] = entry

        rows: List[MemberStatus] = []
        for m in members:
            open_entry = open_by_member.get(m.member_id)
            if open_entry:
                rows.append(
                    MemberStatus(
                        member=m,
                        is_signed_in=True,
                        current_visit_id=open_entry.visit_id,
                        current_sign_in_time=open_entry.sign_in_time,
                    )
                )
                continue

            closed = last_closed_today.get(m.member_id)
            rows.append(
                MemberStatus(
                    member=m,
                    is_signed_in=False,
                    current_sign_in_time=closed.sign_in_time if closed else None,
                    current_sign_out_time=closed.sign_out_time if closed else None,
                )
            )

        needle = (query or "").strip().lower()
        if needle:
            rows = [r for r in rows if _matches(r.member, needle)]
        return sort_for_display(rows)

    def signed_in_members(self, *, now: Optional[datetime] = None) -> List[SignedInMember]:
        now = now or now_local()
        by_id = {m.member_id: m for m in self._members.list_all()}
        out: List[SignedInMember] = []
        for entry in sorted(self._visits.list_open(), key=lambda e: e.sign_in_time):
            m = by_id.get(entry.member_id)
            if not m:
                continue
            out.append(
                SignedInMember(
                    member_id=m.member_id,
                    name=m.name,
                    email=m.email,
                    category=m.category.value,
                    sign_in_time=entry.sign_in_time,
                    duration=max(now - entry.sign_in_time, timedelta(0)),
                )
            )
        return out

    def stats(self, *, now: Optional[datetime] = None) -> DashboardStats:
        now = now or now_local()
        members = self._members.list_all()
        open_members = {e.member_id for e in self._visits.list_open()}
        return DashboardStats(
            total_members=len(members),
            active_members=sum(1 for m in members if m.is_active),
            today_sign_ins=self._visits.count_sign_ins_since(start_of_day(now)),
            currently_in_office=len(open_members),
        )
