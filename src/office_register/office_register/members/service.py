from __future__ import annotations

from typing import Optional, Sequence

from ..common.validators import normalize_email, optional_text, require_email, require_non_empty
from ..core.enums import MemberCategory
from ..core.exceptions import ConflictError, MemberNotFoundError, ValidationError
from ..logging.utils import get_app_logger
from .model import Member
from .repository import MemberRepository

logger = get_app_logger(__name__)


class MemberService:
    """Use case: manage the roster (admin)."""

    def __init__(self, members: MemberRepository):
        self._members = members

    def add_member(
        self,
        *,
        name: str,
        email: str,
        category: str | MemberCategory,
        phone_number: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Member:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        if isinstance(category, MemberCategory):
            cat = category
        else:
            require_non_empty(category, "Category")
            try:
                cat = MemberCategory.parse(category)
            except ValueError:
                raise ValidationError("Unknown member category")

        if self._members.get_by_email(email):
            raise ConflictError("A member with this email already exists")

        try:
            member_id = self._members.create_member(
                name=name,
                email=email,
                category=cat,
                phone_number=optional_text(phone_number),
                role=optional_text(role),
            )
        except ConflictError:
            # Lost a race against a concurrent registration of the same email.
            raise ConflictError("A member with this email already exists")

        logger.info(f"member_added | member_id={member_id} category={cat.value}")
        return self._require(member_id)

    def list_members(self) -> Sequence[Member]:
        return self._members.list_all()

    def get(self, member_id: int) -> Member:
        return self._require(member_id)

    def get_by_email(self, email: str) -> Optional[Member]:
        return self._members.get_by_email(normalize_email(email))

    def set_active(self, member_id: int, *, is_active: bool) -> Member:
        self._require(member_id)
        self._members.set_active(int(member_id), is_active=bool(is_active))
        logger.info(f"member_active_changed | member_id={member_id} is_active={bool(is_active)}")
        return self._require(member_id)

    def toggle_active(self, member_id: int) -> Member:
        member = self._require(member_id)
        return self.set_active(member.member_id, is_active=not member.is_active)

    def _require(self, member_id: int) -> Member:
        member = self._members.get_by_id(int(member_id))
        if not member:
            raise MemberNotFoundError("Member not found")
        return member
