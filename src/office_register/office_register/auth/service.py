from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import normalize_email
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..logging.utils import get_app_logger
from .model import AdminSession
from .repository import AdminRepository
from .session import SessionRepository

logger = get_app_logger(__name__)


class AdminAuthService:
    """Use case: admin login/logout. Everything else only asks ``is_authenticated``."""

    def __init__(self, admins: AdminRepository, sessions: SessionRepository):
        self._admins = admins
        self._sessions = sessions

    def login(self, email: str, password: str) -> AdminSession:
        admin = self._admins.get_by_email(normalize_email(email))
        if not admin or not admin.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(admin.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning(f"admin_login_failed | email={normalize_email(email)}")
            raise AuthenticationError("Invalid email or password")

        s_admin = AdminSession(admin_id=admin.admin_id, email=admin.email, full_name=admin.full_name)
        self._sessions.set(s_admin.to_dict())
        logger.info(f"admin_logged_in | admin_id={admin.admin_id}")
        return s_admin

    def logout(self) -> None:
        current = self.current_session()
        self._sessions.clear()
        if current:
            logger.info(f"admin_logged_out | admin_id={current.admin_id}")

    def current_session(self) -> Optional[AdminSession]:
        data = self._sessions.get()
        if not data:
            return None
        try:
            return AdminSession.from_dict(data)
        except (KeyError, TypeError, ValueError):
            self._sessions.clear()
            return None

    def is_authenticated(self) -> bool:
        return self.current_session() is not None

    def require_admin(self) -> AdminSession:
        current = self.current_session()
        if not current:
            raise AuthorizationError("Admin login required")
        return current
