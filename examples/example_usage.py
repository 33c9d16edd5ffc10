"""Example: drive the service layer without Flask.

Controllers are thin adapters; the same container works from a script.
"""

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for p in (REPO_ROOT, REPO_ROOT / "src" / "office_register"):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from config import get_settings_module

from office_register.container import build_container
from office_register.email.dispatcher import ConsoleEmailDispatcher
from office_register.logging.utils import configure_logging


def main():
    settings = importlib.import_module(get_settings_module())
    configure_logging(level="INFO", fmt="text")
    container = build_container(db_config=settings.DB_CONFIG, dispatcher=ConsoleEmailDispatcher())

    print(container.status_projection.stats().to_dict())
    for row in container.status_projection.signed_in_members():
        print(row.to_dict())


if __name__ == "__main__":
    main()
