from __future__ import annotations

import smtplib

import pytest

from office_register.core.exceptions import DeliveryError
from office_register.email.dispatcher import ConsoleEmailDispatcher, FlaskMailDispatcher, build_otp_message


class FakeMail:
    def __init__(self, error=None):
        self.error = error
        self.outbox = []

    def send(self, msg):
        if self.error:
            raise self.error
        self.outbox.append(msg)


def test_message_contains_code_and_company():
    content = build_otp_message(to_name="Ada Obi", code="482913", company_name="RIL Innovation Lab", ttl_minutes=10)

    assert content.subject == "RIL Innovation Lab check-in code"
    assert "Your OTP for office check-in is: 482913" in content.body
    assert "Hello Ada Obi," in content.body
    assert "10 minutes" in content.body
    assert "482913" in content.html


def test_flask_mail_dispatcher_sends():
    mail = FakeMail()
    dispatcher = FlaskMailDispatcher(mail, sender="desk@example.com")

    assert dispatcher.send("ada@example.com", "Ada Obi", "482913", "Test Lab") is True

    msg = mail.outbox[0]
    assert msg.recipients == ["ada@example.com"]
    assert msg.sender == "desk@example.com"
    assert "482913" in msg.body


def test_rejected_recipient_returns_false():
    err = smtplib.SMTPRecipientsRefused({"ada@example.com": (550, b"no such user")})
    dispatcher = FlaskMailDispatcher(FakeMail(error=err), sender="desk@example.com")

    assert dispatcher.send("ada@example.com", "Ada Obi", "482913", "Test Lab") is False


@pytest.mark.parametrize(
    "err",
    [
        smtplib.SMTPServerDisconnected("gone"),
        smtplib.SMTPAuthenticationError(535, b"bad credentials"),
        ConnectionRefusedError("refused"),
    ],
)
def test_transport_errors_raise_delivery_error(err):
    dispatcher = FlaskMailDispatcher(FakeMail(error=err), sender="desk@example.com")

    with pytest.raises(DeliveryError):
        dispatcher.send("ada@example.com", "Ada Obi", "482913", "Test Lab")


def test_console_dispatcher_always_delivers():
    assert ConsoleEmailDispatcher().send("ada@example.com", "Ada Obi", "482913", "Test Lab") is True
