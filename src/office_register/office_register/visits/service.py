from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email
from ..core.constants import MSG_MEMBER_INACTIVE, MSG_MEMBER_NOT_FOUND
from ..core.exceptions import (
    AlreadySignedInError,
    ConflictError,
    MemberInactiveError,
    MemberNotFoundError,
    NoOpenVisitError,
)
from ..logging.utils import get_app_logger
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import VisitLogEntry, VisitRecord
from .repository import VisitLogRepository

logger = get_app_logger(__name__)


class VisitService:
    """Use case: open a visit on sign-in, close the open one on sign-out.

    At most one open visit per member. The check here gives a friendly message; the
    store's unique key on (member, open visit) is what settles concurrent sign-ins.
    """

    def __init__(self, visits: VisitLogRepository, members: MemberRepository):
        self._visits = visits
        self._members = members

    def _require_member(self, email: str) -> Member:
        member = self._members.get_by_email(normalize_email(email))
        if not member:
            raise MemberNotFoundError(MSG_MEMBER_NOT_FOUND)
        return member

    def sign_in(self, email: str, *, now: Optional[datetime] = None) -> VisitRecord:
        now = now or now_local()
        member = self._require_member(email)
        if not member.is_active:
            raise MemberInactiveError(MSG_MEMBER_INACTIVE)

        if self._visits.find_open_by_member(member.member_id):
            raise AlreadySignedInError(f"{member.name} is already signed in")

        try:
            visit_id = self._visits.insert(member_id=member.member_id, sign_in_time=now)
        except ConflictError:
            raise AlreadySignedInError(f"{member.name} is already signed in")

        logger.info(f"member_signed_in | member_id={member.member_id} visit_id={visit_id}")
        return VisitRecord(
            visit_id=visit_id,
            member_id=member.member_id,
            member_name=member.name,
            sign_in_time=now,
        )

    def sign_out(self, email: str, *, now: Optional[datetime] = None) -> VisitRecord:
        now = now or now_local()
        member = self._require_member(email)

        entry = self._visits.find_open_by_member(member.member_id)
        if not entry:
            raise NoOpenVisitError(f"{member.name} is not signed in")

        # Clock skew between app servers must not produce a negative visit.
        sign_out_time = max(now, entry.sign_in_time)
        if not self._visits.close(visit_id=entry.visit_id, sign_out_time=sign_out_time):
            raise NoOpenVisitError(f"{member.name} is not signed in")

        duration = sign_out_time - entry.sign_in_time
        logger.info(
            f"member_signed_out | member_id={member.member_id} visit_id={entry.visit_id} "
            f"duration_s={int(duration.total_seconds())}"
        )
        return VisitRecord(
            visit_id=entry.visit_id,
            member_id=member.member_id,
            member_name=member.name,
            sign_in_time=entry.sign_in_time,
            sign_out_time=sign_out_time,
            duration=duration,
        )

    def current_visit(self, email: str) -> Optional[VisitRecord]:
        member = self._require_member(email)
        entry: Optional[VisitLogEntry] = self._visits.find_open_by_member(member.member_id)
        if not entry:
            return None
        return VisitRecord(
            visit_id=entry.visit_id,
            member_id=member.member_id,
            member_name=member.name,
            sign_in_time=entry.sign_in_time,
        )
