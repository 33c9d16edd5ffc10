from __future__ import annotations

import importlib
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "office_register"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from office_register.database.bootstrap import DEMO_MEMBERS, ensure_demo_data
from office_register.database.connection import DBConfig
from office_register.logging.utils import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(level=settings.LOG_LEVEL, fmt="text")
    db_config = dict(settings.DB_CONFIG)

    admin_email = os.getenv("ADMIN_EMAIL", settings.DEMO_ADMIN_EMAIL)
    ensure_demo_data(
        db_config,
        admin_email=admin_email,
        admin_password=os.getenv("ADMIN_PASSWORD", settings.DEMO_ADMIN_PASSWORD),
    )
    print(
        f"OK: Seeded database -> {DBConfig.from_mapping(db_config).describe()} "
        f"(admin={admin_email}, members={len(DEMO_MEMBERS)})"
    )


if __name__ == "__main__":
    main()
