from __future__ import annotations

from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from office_register.auth.model import Admin
from office_register.auth.session import InMemorySessionRepository
from office_register.container import assemble_container
from office_register.core.enums import MemberCategory, VisitChangeKind
from office_register.core.exceptions import ConflictError
from office_register.events.feed import ChangeFeed, VisitChange
from office_register.members.model import Member
from office_register.otp.model import OtpRecord
from office_register.visits.model import VisitLogEntry

ADMIN_PASSWORD = "correct-horse"


class InMemoryMemberRepo:
    def __init__(self, members=()):
        self._members: dict[int, Member] = {m.member_id: m for m in members}
        self._next_id = max(self._members, default=0) + 1

    def get_by_id(self, member_id):
        return self._members.get(int(member_id))

    def get_by_email(self, email):
        for m in self._members.values():
            if m.email.lower() == (email or "").lower():
                return m
        return None

    def list_all(self):
        return sorted(self._members.values(), key=lambda m: m.name)

    def create_member(self, *, name, email, category, phone_number=None, role=None):
        if self.get_by_email(email):
            raise ConflictError("Record already exists")
        member_id = self._next_id
        self._next_id += 1
        self._members[member_id] = Member(
            member_id=member_id,
            name=name,
            email=email,
            category=category,
            phone_number=phone_number,
            role=role,
            created_at=datetime(2026, 3, 1, 8, 0, 0),
        )
        return member_id

    def set_active(self, member_id, *, is_active):
        m = self._members.get(int(member_id))
        if not m:
            return False
        self._members[m.member_id] = Member(
            member_id=m.member_id,
            name=m.name,
            email=m.email,
            category=m.category,
            phone_number=m.phone_number,
            role=m.role,
            is_active=is_active,
            created_at=m.created_at,
        )
        return True


class InMemoryOtpRepo:
    def __init__(self):
        self.records: dict[str, OtpRecord] = {}

    def upsert(self, *, email, code, expires_at, created_at):
        self.records[email] = OtpRecord(email=email, code=code, expires_at=expires_at, created_at=created_at)

    def get_by_email(self, email):
        return self.records.get(email)

    def delete_by_email(self, email, *, code=None):
        record = self.records.get(email)
        if not record or (code is not None and record.code != code):
            return False
        del self.records[email]
        return True


class InMemoryVisitLogRepo:
    """Mirrors the MySQL unique key: one open visit per member."""

    def __init__(self, feed: Optional[ChangeFeed] = None):
        self.entries: dict[int, VisitLogEntry] = {}
        self._next_id = 1
        self.feed = feed or ChangeFeed()

    def insert(self, *, member_id, sign_in_time):
        if self.find_open_by_member(member_id):
            raise ConflictError("Record already exists")
        visit_id = self._next_id
        self._next_id += 1
        self.entries[visit_id] = VisitLogEntry(visit_id=visit_id, member_id=member_id, sign_in_time=sign_in_time)
        self.feed.publish(VisitChange(kind=VisitChangeKind.INSERT, visit_id=visit_id, member_id=member_id, at=sign_in_time))
        return visit_id

    def find_open_by_member(self, member_id):
        for e in self.entries.values():
            if e.member_id == member_id and e.is_open:
                return e
        return None

    def close(self, *, visit_id, sign_out_time):
        e = self.entries.get(visit_id)
        if not e or not e.is_open:
            return False
        self.entries[visit_id] = VisitLogEntry(
            visit_id=e.visit_id,
            member_id=e.member_id,
            sign_in_time=e.sign_in_time,
            sign_out_time=sign_out_time,
        )
        self.feed.publish(VisitChange(kind=VisitChangeKind.UPDATE, visit_id=visit_id, member_id=e.member_id, at=sign_out_time))
        return True

    def list_open(self):
        return [e for e in self.entries.values() if e.is_open]

    def list_closed_since(self, since):
        return [e for e in self.entries.values() if not e.is_open and e.sign_out_time >= since]

    def count_sign_ins_since(self, since):
        return sum(1 for e in self.entries.values() if e.sign_in_time >= since)

    def latest_change_marker(self):
        return (len(self.entries), len(self.list_open()))

    def subscribe(self, on_change):
        return self.feed.subscribe(on_change)


class InMemoryAdminRepo:
    def __init__(self, admins=()):
        self._admins = {a.email: a for a in admins}

    def get_by_email(self, email):
        return self._admins.get(email)


class FakeDispatcher:
    def __init__(self, result: bool = True, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str, str, str]] = []

    def send(self, to_email, to_name, code, company_name):
        self.sent.append((to_email, to_name, code, company_name))
        if self.error:
            raise self.error
        return self.result

    @property
    def last_code(self):
        return self.sent[-1][2] if self.sent else None


def make_members():
    return [
        Member(1, "Ada Obi", "ada@example.com", MemberCategory.STAFF, role="Engineer"),
        Member(2, "Bola Ade", "bola@example.com", MemberCategory.UNDERSTUDY),
        Member(3, "Chidi Eze", "chidi@example.com", MemberCategory.LAB_USER, is_active=False),
    ]


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 2, 9, 30, 0)


@pytest.fixture
def members_repo():
    return InMemoryMemberRepo(make_members())


@pytest.fixture
def otp_repo():
    return InMemoryOtpRepo()


@pytest.fixture
def visits_repo():
    return InMemoryVisitLogRepo()


@pytest.fixture
def admins_repo():
    return InMemoryAdminRepo(
        [
            Admin(1, "admin@example.com", "Admin Demo", generate_password_hash(ADMIN_PASSWORD)),
            Admin(2, "old@example.com", "Old Admin", generate_password_hash(ADMIN_PASSWORD), is_active=False),
        ]
    )


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def container(members_repo, otp_repo, visits_repo, admins_repo, dispatcher):
    """Services over in-memory stores; sessions use the Flask cookie session."""
    return assemble_container(
        members_repo=members_repo,
        otp_repo=otp_repo,
        visits_repo=visits_repo,
        admins_repo=admins_repo,
        dispatcher=dispatcher,
        company_name="Test Lab",
    )


@pytest.fixture
def service_container(members_repo, otp_repo, visits_repo, admins_repo, dispatcher):
    """Same wiring with in-memory sessions, for tests outside a request."""
    return assemble_container(
        members_repo=members_repo,
        otp_repo=otp_repo,
        visits_repo=visits_repo,
        admins_repo=admins_repo,
        dispatcher=dispatcher,
        admin_sessions=InMemorySessionRepository(),
        member_sessions=InMemorySessionRepository(),
        company_name="Test Lab",
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from office_register.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()
