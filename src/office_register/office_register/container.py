from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .auth.mysql_admin_repository import MySQLAdminRepository
from .auth.repository import AdminRepository
from .auth.service import AdminAuthService
from .auth.session import FlaskSessionRepository, SessionRepository
from .checkin.service import CheckInService
from .core.constants import DEFAULT_COMPANY_NAME, DEFAULT_POLL_SECONDS, OTP_TTL_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .email.dispatcher import EmailDispatcher
from .events.feed import ChangeFeed, PollingChangeFeed
from .logging.utils import get_app_logger
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .otp.mysql_otp_repository import MySQLOtpRepository
from .otp.repository import OtpRepository
from .otp.service import OtpService
from .status.service import StatusProjection
from .status.view import StatusView
from .visits.mysql_visit_repository import MySQLVisitLogRepository
from .visits.repository import VisitLogRepository
from .visits.service import VisitService

logger = get_app_logger(__name__)

ADMIN_SESSION_KEY = "admin"
MEMBER_SESSION_KEY = "member_checkin"


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    otp_repo: OtpRepository
    visits_repo: VisitLogRepository
    admins_repo: AdminRepository
    dispatcher: EmailDispatcher

    member_service: MemberService
    otp_service: OtpService
    visit_service: VisitService
    status_projection: StatusProjection
    auth_service: AdminAuthService
    checkin_service: CheckInService

    def open_status_view(self, *, query: Optional[str] = None, deferred: bool = False) -> StatusView:
        return StatusView(self.status_projection, self.visits_repo, query=query, deferred=deferred).open()


def assemble_container(
    *,
    members_repo: MemberRepository,
    otp_repo: OtpRepository,
    visits_repo: VisitLogRepository,
    admins_repo: AdminRepository,
    dispatcher: EmailDispatcher,
    conn: Optional[DatabaseConnection] = None,
    admin_sessions: Optional[SessionRepository] = None,
    member_sessions: Optional[SessionRepository] = None,
    company_name: str = DEFAULT_COMPANY_NAME,
    otp_ttl_minutes: int = OTP_TTL_MINUTES,
) -> Container:
    """Wire services over already-built stores (MySQL in the app, in-memory in tests)."""
    member_service = MemberService(members_repo)
    otp_service = OtpService(
        members_repo,
        otp_repo,
        dispatcher,
        company_name=company_name,
        ttl_minutes=otp_ttl_minutes,
    )
    visit_service = VisitService(visits_repo, members_repo)
    status_projection = StatusProjection(members_repo, visits_repo)
    auth_service = AdminAuthService(admins_repo, admin_sessions or FlaskSessionRepository(ADMIN_SESSION_KEY))
    checkin_service = CheckInService(
        otp_service,
        visit_service,
        member_sessions or FlaskSessionRepository(MEMBER_SESSION_KEY, permanent=True),
    )

    return Container(
        conn=conn,
        members_repo=members_repo,
        otp_repo=otp_repo,
        visits_repo=visits_repo,
        admins_repo=admins_repo,
        dispatcher=dispatcher,
        member_service=member_service,
        otp_service=otp_service,
        visit_service=visit_service,
        status_projection=status_projection,
        auth_service=auth_service,
        checkin_service=checkin_service,
    )


def build_container(
    *,
    db_config: dict,
    dispatcher: EmailDispatcher,
    change_feed: str = "local",
    poll_seconds: float = DEFAULT_POLL_SECONDS,
    company_name: str = DEFAULT_COMPANY_NAME,
    otp_ttl_minutes: int = OTP_TTL_MINUTES,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    feed: ChangeFeed
    if change_feed == "poll":
        # visits_repo is bound below; the poller only calls this after subscribe()
        feed = PollingChangeFeed(lambda: visits_repo.latest_change_marker(), interval_seconds=poll_seconds)
    else:
        feed = ChangeFeed()

    members_repo = MySQLMemberRepository(conn)
    otp_repo = MySQLOtpRepository(conn)
    visits_repo = MySQLVisitLogRepository(conn, feed)
    admins_repo = MySQLAdminRepository(conn)

    logger.info(f"container_built | db={conn.config.describe()} change_feed={change_feed}")

    return assemble_container(
        conn=conn,
        members_repo=members_repo,
        otp_repo=otp_repo,
        visits_repo=visits_repo,
        admins_repo=admins_repo,
        dispatcher=dispatcher,
        company_name=company_name,
        otp_ttl_minutes=otp_ttl_minutes,
    )
