from __future__ import annotations

import importlib
import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_mail import Mail

from config import get_settings_module

from .auth.controller import register as register_auth
from .checkin.controller import register as register_checkin
from .common.http import register_error_handlers
from .core.constants import DEFAULT_SESSION_DAYS
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .database.connection import DBConfig
from .email.dispatcher import ConsoleEmailDispatcher, EmailDispatcher, FlaskMailDispatcher
from .logging.utils import configure_logging, get_app_logger
from .members.controller import register as register_members
from .status.controller import register as register_status

logger = get_app_logger(__name__)

MAIL_KEYS = (
    "MAIL_SERVER",
    "MAIL_PORT",
    "MAIL_USE_TLS",
    "MAIL_USE_SSL",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_DEFAULT_SENDER",
)


def _build_dispatcher(app: Flask, settings) -> EmailDispatcher:
    ttl = int(getattr(settings, "OTP_TTL_MINUTES", 10))
    backend = str(getattr(settings, "EMAIL_BACKEND", "console")).lower()
    if backend == "smtp":
        mail = Mail(app)
        return FlaskMailDispatcher(mail, sender=app.config["MAIL_DEFAULT_SENDER"], ttl_minutes=ttl)
    return ConsoleEmailDispatcher(ttl_minutes=ttl)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt ``container`` (tests) to skip database bootstrap and wiring.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    # member check-in sessions are permanent so a browser restart keeps the visit
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    for key in MAIL_KEYS:
        app.config[key] = getattr(settings, key, None)

    configure_logging(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        fmt=getattr(settings, "LOG_FORMAT", "json"),
        environment=os.getenv("APP_ENV", "development"),
    )
    logger.info(f"app_starting | settings={settings_module} db={DBConfig.from_mapping(db_config).describe()}")

    if container is None:
        auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
        auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
        if auto_init_db:
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info(f"schema_ready | tables={len(list_tables(db_config))}")
        if auto_seed_db:
            ensure_demo_data(
                db_config,
                admin_email=getattr(settings, "DEMO_ADMIN_EMAIL", "admin@example.com"),
                admin_password=getattr(settings, "DEMO_ADMIN_PASSWORD", "admin123"),
            )

        container = build_container(
            db_config=db_config,
            dispatcher=_build_dispatcher(app, settings),
            change_feed=str(getattr(settings, "CHANGE_FEED", "local")).lower(),
            poll_seconds=float(getattr(settings, "STATUS_POLL_SECONDS", 5)),
            company_name=getattr(settings, "COMPANY_NAME", "RIL Innovation Lab"),
            otp_ttl_minutes=int(getattr(settings, "OTP_TTL_MINUTES", 10)),
        )

    app.extensions["office_register"] = container

    register_error_handlers(app)
    register_auth(app, container)
    register_checkin(app, container)
    register_members(app, container)
    register_status(app, container)

    return app
