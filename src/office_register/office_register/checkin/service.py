from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..auth.session import SessionRepository
from ..common.validators import normalize_email
from ..core.enums import VerifyFailure
from ..core.exceptions import (
    AlreadySignedInError,
    InvalidOtpError,
    NoActiveSessionError,
    NoOpenVisitError,
    OtpExpiredError,
)
from ..logging.utils import get_app_logger
from ..otp.model import IssueResult
from ..otp.service import OtpService
from ..visits.model import VisitRecord
from ..visits.service import VisitService
from .model import MemberSession

logger = get_app_logger(__name__)


class CheckInService:
    """Member-facing flow: request code -> verify -> visit opened -> later sign out."""

    def __init__(self, otp: OtpService, visits: VisitService, sessions: SessionRepository):
        self._otp = otp
        self._visits = visits
        self._sessions = sessions

    def request_code(self, email: str, *, now: Optional[datetime] = None) -> IssueResult:
        return self._otp.issue(email, now=now)

    def resend_code(self, email: str, *, now: Optional[datetime] = None) -> IssueResult:
        return self._otp.resend(email, now=now)

    def verify_and_sign_in(self, email: str, code: str, *, now: Optional[datetime] = None) -> VisitRecord:
        result = self._otp.verify(email, code, now=now)
        if not result.valid:
            if result.reason == VerifyFailure.EXPIRED:
                raise OtpExpiredError(result.message)
            raise InvalidOtpError(result.message)

        try:
            record = self._visits.sign_in(email, now=now)
        except AlreadySignedInError:
            # Open visit from another device or an expired cookie: hand it back so the
            # member can still sign out.
            record = self._visits.current_visit(email)
            if record is None:
                raise
            logger.info(f"checkin_session_resumed | member_id={record.member_id} visit_id={record.visit_id}")

        s = MemberSession(
            email=normalize_email(email),
            name=record.member_name,
            member_id=record.member_id,
            visit_id=record.visit_id,
            sign_in_time=record.sign_in_time,
        )
        self._sessions.set(s.to_dict())
        return record

    def sign_out(self, *, now: Optional[datetime] = None) -> VisitRecord:
        current = self.current_session()
        if not current:
            raise NoActiveSessionError("No active session")

        try:
            record = self._visits.sign_out(current.email, now=now)
        except NoOpenVisitError:
            # Visit already closed elsewhere; the stored session is stale.
            self._sessions.clear()
            logger.info(f"stale_checkin_session_cleared | member_id={current.member_id}")
            raise

        self._sessions.clear()
        return record

    def current_session(self) -> Optional[MemberSession]:
        data = self._sessions.get()
        if not data:
            return None
        s = MemberSession.from_dict(data)
        if s is None:
            self._sessions.clear()
        return s
