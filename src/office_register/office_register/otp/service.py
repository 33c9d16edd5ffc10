from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email
from ..core.constants import (
    DEFAULT_COMPANY_NAME,
    MSG_EXPIRED_OTP,
    MSG_INVALID_OTP,
    MSG_MEMBER_INACTIVE,
    MSG_MEMBER_NOT_FOUND,
    MSG_OTP_DELIVERY_UNCERTAIN,
    MSG_OTP_SENT,
    MSG_OTP_VERIFIED,
    OTP_LENGTH,
    OTP_TTL_MINUTES,
)
from ..core.enums import VerifyFailure
from ..core.exceptions import DeliveryError, MemberInactiveError, MemberNotFoundError
from ..email.dispatcher import EmailDispatcher
from ..logging.utils import get_app_logger
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import IssueResult, VerificationResult
from .repository import OtpRepository

logger = get_app_logger(__name__)


def generate_code() -> str:
    """Random 6-digit code, uniform over 100000-999999."""
    low = 10 ** (OTP_LENGTH - 1)
    return f"{low + secrets.randbelow(9 * low):0{OTP_LENGTH}d}"


class OtpService:
    """
    OTP lifecycle:
    - issue: generate, store (one live code per email), email
    - verify: single use, expiry checked against the stored window
    - resend: drop any live code, then issue a fresh one
    """

    def __init__(
        self,
        members: MemberRepository,
        otps: OtpRepository,
        dispatcher: EmailDispatcher,
        *,
        company_name: str = DEFAULT_COMPANY_NAME,
        ttl_minutes: int = OTP_TTL_MINUTES,
    ):
        self._members = members
        self._otps = otps
        self._dispatcher = dispatcher
        self._company_name = company_name
        self._ttl = timedelta(minutes=int(ttl_minutes))

    def _require_active_member(self, email: str) -> Member:
        member = self._members.get_by_email(email)
        if not member:
            raise MemberNotFoundError(MSG_MEMBER_NOT_FOUND)
        if not member.is_active:
            raise MemberInactiveError(MSG_MEMBER_INACTIVE)
        return member

    def issue(self, email: str, *, now: Optional[datetime] = None) -> IssueResult:
        """
        Issue a code for an active member and try to email it.

        Email failure does not roll back storage: the code stays valid and the result
        reports ``delivered=False``.

        Raises:
            MemberNotFoundError, MemberInactiveError: nothing is stored.
            StoreError: the code could not be stored.
        """
        now = now or now_local()
        email = normalize_email(email)
        member = self._require_active_member(email)

        code = generate_code()
        expires_at = now + self._ttl
        self._otps.upsert(email=email, code=code, expires_at=expires_at, created_at=now)
        logger.info(f"otp_issued | member_id={member.member_id} expires_at={expires_at.isoformat(timespec='seconds')}")

        delivered = self._deliver(member, code)
        return IssueResult(
            email=email,
            member_name=member.name,
            delivered=delivered,
            expires_at=expires_at,
            code=code,
            message=MSG_OTP_SENT if delivered else MSG_OTP_DELIVERY_UNCERTAIN,
        )

    def _deliver(self, member: Member, code: str) -> bool:
        try:
            delivered = bool(self._dispatcher.send(member.email, member.name, code, self._company_name))
        except DeliveryError as e:
            logger.warning(f"otp_delivery_failed | member_id={member.member_id} error={e}")
            return False
        if not delivered:
            logger.warning(f"otp_delivery_failed | member_id={member.member_id} error=dispatcher returned false")
        return delivered

    def verify(self, email: str, code: str, *, now: Optional[datetime] = None) -> VerificationResult:
        """
        Check ``code`` against the stored record. Always destructive on a match.

        A missing record, a wrong code and malformed input all answer ``NOT_FOUND`` with
        the same message, so callers cannot tell which emails hold a live code.
        """
        now = now or now_local()
        email = normalize_email(email)
        submitted = (code or "").strip()

        record = self._otps.get_by_email(email)
        if (
            not record
            or len(submitted) != OTP_LENGTH
            or not submitted.isdigit()
            or not hmac.compare_digest(record.code, submitted)
        ):
            logger.warning(f"otp_verify_failed | email={email} reason=not_found")
            return VerificationResult(valid=False, reason=VerifyFailure.NOT_FOUND, message=MSG_INVALID_OTP)

        if record.is_expired(now):
            self._otps.delete_by_email(email, code=record.code)
            logger.info(f"otp_verify_failed | email={email} reason=expired")
            return VerificationResult(valid=False, reason=VerifyFailure.EXPIRED, message=MSG_EXPIRED_OTP)

        # Only the caller that actually removes the record wins; a concurrent verify of
        # the same code sees nothing to delete.
        if not self._otps.delete_by_email(email, code=record.code):
            logger.warning(f"otp_verify_failed | email={email} reason=already_used")
            return VerificationResult(valid=False, reason=VerifyFailure.NOT_FOUND, message=MSG_INVALID_OTP)

        logger.info(f"otp_verified | email={email}")
        return VerificationResult(valid=True, reason=None, message=MSG_OTP_VERIFIED)

    def resend(self, email: str, *, now: Optional[datetime] = None) -> IssueResult:
        self.invalidate(email)
        return self.issue(email, now=now)

    def invalidate(self, email: str) -> bool:
        removed = self._otps.delete_by_email(normalize_email(email))
        if removed:
            logger.info(f"otp_invalidated | email={normalize_email(email)}")
        return removed
