from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import MemberCategory
from .model import Member


class MemberRepository(Protocol):
    """Repository interface for the member roster.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Member]:
        """Case-insensitive lookup."""
        raise NotImplementedError

    def list_all(self) -> Sequence[Member]:
        """All members ordered by name."""
        raise NotImplementedError

    def create_member(
        self,
        *,
        name: str,
        email: str,
        category: MemberCategory,
        phone_number: Optional[str],
        role: Optional[str],
    ) -> int:
        raise NotImplementedError

    def set_active(self, member_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
