from __future__ import annotations

from datetime import timedelta

import pytest

from office_register.core.constants import MSG_EXPIRED_OTP, MSG_INVALID_OTP, MSG_OTP_DELIVERY_UNCERTAIN, MSG_OTP_SENT
from office_register.core.enums import VerifyFailure
from office_register.core.exceptions import DeliveryError, MemberInactiveError, MemberNotFoundError
from office_register.otp.service import OtpService, generate_code

from conftest import FakeDispatcher


def _svc(members_repo, otp_repo, dispatcher, ttl=10):
    return OtpService(members_repo, otp_repo, dispatcher, company_name="Test Lab", ttl_minutes=ttl)


def test_generate_code_is_six_digits_without_leading_zero():
    for _ in range(200):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_issue_stores_code_and_emails_it(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)

    result = svc.issue("  ADA@example.com ", now=fixed_now)

    stored = otp_repo.records["ada@example.com"]
    assert result.delivered is True
    assert result.message == MSG_OTP_SENT
    assert result.member_name == "Ada Obi"
    assert stored.code == result.code
    assert stored.expires_at == fixed_now + timedelta(minutes=10)
    assert dispatcher.sent == [("ada@example.com", "Ada Obi", result.code, "Test Lab")]


def test_issue_replaces_previous_code(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    svc.issue("ada@example.com", now=fixed_now)
    second = svc.issue("ada@example.com", now=fixed_now + timedelta(minutes=1))

    assert len(otp_repo.records) == 1
    assert otp_repo.records["ada@example.com"].code == second.code


def test_issue_unknown_email_stores_nothing(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)

    with pytest.raises(MemberNotFoundError):
        svc.issue("nobody@example.com", now=fixed_now)

    assert otp_repo.records == {}
    assert dispatcher.sent == []


def test_issue_inactive_member_is_rejected(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)

    with pytest.raises(MemberInactiveError):
        svc.issue("chidi@example.com", now=fixed_now)

    assert otp_repo.records == {}


def test_delivery_failure_keeps_code_valid(members_repo, otp_repo, fixed_now):
    svc = _svc(members_repo, otp_repo, FakeDispatcher(result=False))

    result = svc.issue("ada@example.com", now=fixed_now)

    assert result.delivered is False
    assert result.message == MSG_OTP_DELIVERY_UNCERTAIN
    assert svc.verify("ada@example.com", result.code, now=fixed_now).valid is True


def test_transport_error_is_reported_as_not_delivered(members_repo, otp_repo, fixed_now):
    svc = _svc(members_repo, otp_repo, FakeDispatcher(error=DeliveryError("smtp down")))

    result = svc.issue("ada@example.com", now=fixed_now)

    assert result.delivered is False
    assert "ada@example.com" in otp_repo.records


def test_verify_is_single_use(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    code = svc.issue("ada@example.com", now=fixed_now).code

    first = svc.verify("ada@example.com", code, now=fixed_now + timedelta(minutes=2))
    second = svc.verify("ada@example.com", code, now=fixed_now + timedelta(minutes=2))

    assert first.valid is True
    assert second.valid is False
    assert second.reason == VerifyFailure.NOT_FOUND
    assert otp_repo.records == {}


def test_verify_wrong_code_keeps_record(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    code = svc.issue("ada@example.com", now=fixed_now).code
    wrong = "999999" if code != "999999" else "100000"

    result = svc.verify("ada@example.com", wrong, now=fixed_now)

    assert result.valid is False
    assert result.reason == VerifyFailure.NOT_FOUND
    assert result.message == MSG_INVALID_OTP
    assert svc.verify("ada@example.com", code, now=fixed_now).valid is True


@pytest.mark.parametrize("bad", ["", "12345", "1234567", "12a456"])
def test_verify_malformed_code_is_not_found(members_repo, otp_repo, dispatcher, fixed_now, bad):
    svc = _svc(members_repo, otp_repo, dispatcher)
    svc.issue("ada@example.com", now=fixed_now)

    result = svc.verify("ada@example.com", bad, now=fixed_now)

    assert result.reason == VerifyFailure.NOT_FOUND
    assert "ada@example.com" in otp_repo.records


def test_verify_at_expiry_boundary_is_still_valid(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    code = svc.issue("ada@example.com", now=fixed_now).code

    assert svc.verify("ada@example.com", code, now=fixed_now + timedelta(minutes=10)).valid is True


def test_verify_after_expiry_deletes_record(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    code = svc.issue("ada@example.com", now=fixed_now).code

    result = svc.verify("ada@example.com", code, now=fixed_now + timedelta(minutes=10, seconds=1))

    assert result.valid is False
    assert result.reason == VerifyFailure.EXPIRED
    assert result.message == MSG_EXPIRED_OTP
    assert otp_repo.records == {}
    again = svc.verify("ada@example.com", code, now=fixed_now + timedelta(minutes=11))
    assert again.reason == VerifyFailure.NOT_FOUND


def test_verify_loses_race_when_record_already_consumed(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    code = svc.issue("ada@example.com", now=fixed_now).code

    original_delete = otp_repo.delete_by_email

    def delete_after_concurrent_winner(email, *, code=None):
        original_delete(email, code=code)
        return False

    otp_repo.delete_by_email = delete_after_concurrent_winner

    result = svc.verify("ada@example.com", code, now=fixed_now)

    assert result.valid is False
    assert result.reason == VerifyFailure.NOT_FOUND


def test_resend_invalidates_old_code(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    old = svc.issue("ada@example.com", now=fixed_now).code

    new = svc.resend("ada@example.com", now=fixed_now + timedelta(minutes=1)).code

    assert otp_repo.records["ada@example.com"].code == new
    if old != new:
        assert svc.verify("ada@example.com", old, now=fixed_now).valid is False
    assert svc.verify("ada@example.com", new, now=fixed_now + timedelta(minutes=1)).valid is True


def test_resend_for_inactive_member_drops_existing_code(members_repo, otp_repo, dispatcher, fixed_now):
    svc = _svc(members_repo, otp_repo, dispatcher)
    svc.issue("bola@example.com", now=fixed_now)
    members_repo.set_active(2, is_active=False)

    with pytest.raises(MemberInactiveError):
        svc.resend("bola@example.com", now=fixed_now)

    assert otp_repo.records == {}


@pytest.mark.parametrize("email", ["ada@example.com", "ghost@example.com"])
def test_verify_with_nothing_issued_hides_membership(members_repo, otp_repo, dispatcher, fixed_now, email):
    svc = _svc(members_repo, otp_repo, dispatcher)

    result = svc.verify(email, "000000", now=fixed_now)

    assert result.valid is False
    assert result.reason == VerifyFailure.NOT_FOUND
    assert result.message == MSG_INVALID_OTP
    assert otp_repo.records == {}
