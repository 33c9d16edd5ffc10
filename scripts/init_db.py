from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "office_register"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from office_register.database.bootstrap import apply_schema, list_tables
from office_register.database.connection import DBConfig
from office_register.logging.utils import configure_logging


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    configure_logging(level=settings.LOG_LEVEL, fmt="text")
    db_config = dict(settings.DB_CONFIG)

    schema_path = REPO_ROOT / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    print(f"OK: Applied schema.sql -> {DBConfig.from_mapping(db_config).describe()} (tables={len(tables)})")


if __name__ == "__main__":
    main()
