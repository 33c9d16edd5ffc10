"""Settings shared by every environment; env modules import * and override."""
import os


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "office-register-dev-secret"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "office_register")

    COMPANY_NAME = os.environ.get("COMPANY_NAME", "RIL Innovation Lab")
    OTP_TTL_MINUTES = int(os.environ.get("OTP_TTL_MINUTES", "10"))

    # smtp | console
    EMAIL_BACKEND = os.environ.get("EMAIL_BACKEND", "console").strip().lower()
    MAIL_SERVER = os.environ.get("MAIL_SERVER", "localhost")
    MAIL_PORT = int(os.environ.get("MAIL_PORT", "587"))
    MAIL_USE_TLS = _flag("MAIL_USE_TLS", "1")
    MAIL_USE_SSL = _flag("MAIL_USE_SSL", "0")
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.environ.get("MAIL_DEFAULT_SENDER", "no-reply@office-register.local")

    # local | poll
    CHANGE_FEED = os.environ.get("CHANGE_FEED", "local").strip().lower()
    STATUS_POLL_SECONDS = float(os.environ.get("STATUS_POLL_SECONDS", "5"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.environ.get("LOG_FORMAT", "json")

    DEMO_ADMIN_EMAIL = os.environ.get("DEMO_ADMIN_EMAIL", "admin@example.com")
    DEMO_ADMIN_PASSWORD = os.environ.get("DEMO_ADMIN_PASSWORD", "admin123")


SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

COMPANY_NAME = Config.COMPANY_NAME
OTP_TTL_MINUTES = Config.OTP_TTL_MINUTES

EMAIL_BACKEND = Config.EMAIL_BACKEND
MAIL_SERVER = Config.MAIL_SERVER
MAIL_PORT = Config.MAIL_PORT
MAIL_USE_TLS = Config.MAIL_USE_TLS
MAIL_USE_SSL = Config.MAIL_USE_SSL
MAIL_USERNAME = Config.MAIL_USERNAME
MAIL_PASSWORD = Config.MAIL_PASSWORD
MAIL_DEFAULT_SENDER = Config.MAIL_DEFAULT_SENDER

CHANGE_FEED = Config.CHANGE_FEED
STATUS_POLL_SECONDS = Config.STATUS_POLL_SECONDS

LOG_LEVEL = Config.LOG_LEVEL
LOG_FORMAT = Config.LOG_FORMAT

DEMO_ADMIN_EMAIL = Config.DEMO_ADMIN_EMAIL
DEMO_ADMIN_PASSWORD = Config.DEMO_ADMIN_PASSWORD

DEBUG = False
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
