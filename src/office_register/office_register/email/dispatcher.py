from __future__ import annotations

import smtplib
from dataclasses import dataclass
from typing import Protocol

from flask_mail import Mail, Message

from ..core.constants import OTP_TTL_MINUTES
from ..core.exceptions import DeliveryError
from ..logging.utils import get_app_logger

logger = get_app_logger(__name__)


class EmailDispatcher(Protocol):
    def send(self, to_email: str, to_name: str, code: str, company_name: str) -> bool:
        """Deliver the code; ``False`` for ordinary delivery failures.

        Raises ``DeliveryError`` only for transport-level faults.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class OtpMessage:
    subject: str
    body: str
    html: str


def build_otp_message(*, to_name: str, code: str, company_name: str, ttl_minutes: int = OTP_TTL_MINUTES) -> OtpMessage:
    greeting = f"Hello {to_name}," if to_name else "Hello,"
    body = (
        f"{greeting}\n\n"
        f"Your OTP for office check-in is: {code}\n"
        f"This code is valid for {ttl_minutes} minutes and can be used once.\n\n"
        f"If you did not request it, you can ignore this email.\n\n"
        f"{company_name}"
    )
    html = (
        f"<p>{greeting}</p>"
        f"<p>Your OTP for office check-in is: <strong style=\"font-size:20px;letter-spacing:3px\">{code}</strong></p>"
        f"<p>This code is valid for {ttl_minutes} minutes and can be used once.</p>"
        f"<p>If you did not request it, you can ignore this email.</p>"
        f"<p>{company_name}</p>"
    )
    return OtpMessage(subject=f"{company_name} check-in code", body=body, html=html)


class FlaskMailDispatcher:
    """Send OTP emails through Flask-Mail (SMTP).

    Must be called inside an application context; the controllers always are.
    """

    def __init__(self, mail: Mail, *, sender: str, ttl_minutes: int = OTP_TTL_MINUTES):
        self._mail = mail
        self._sender = sender
        self._ttl_minutes = int(ttl_minutes)

    def send(self, to_email: str, to_name: str, code: str, company_name: str) -> bool:
        content = build_otp_message(to_name=to_name, code=code, company_name=company_name, ttl_minutes=self._ttl_minutes)
        msg = Message(
            subject=content.subject,
            recipients=[to_email],
            body=content.body,
            html=content.html,
            sender=self._sender,
        )
        try:
            self._mail.send(msg)
        except (smtplib.SMTPRecipientsRefused, smtplib.SMTPSenderRefused, smtplib.SMTPDataError) as e:
            logger.warning(f"otp_email_rejected | to={to_email} error={e}")
            return False
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"otp_email_transport_error | to={to_email} error={e}")
            raise DeliveryError("Email service is unavailable") from e

        logger.info(f"otp_email_sent | to={to_email}")
        return True


class ConsoleEmailDispatcher:
    """Development backend: write the message to the log instead of sending it."""

    def __init__(self, *, ttl_minutes: int = OTP_TTL_MINUTES):
        self._ttl_minutes = int(ttl_minutes)

    def send(self, to_email: str, to_name: str, code: str, company_name: str) -> bool:
        content = build_otp_message(to_name=to_name, code=code, company_name=company_name, ttl_minutes=self._ttl_minutes)
        logger.info(f"otp_email_console | to={to_email} subject={content.subject!r} code={code}")
        return True
