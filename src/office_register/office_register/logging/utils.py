"""
Logging utilities.

All modules obtain loggers through ``get_app_logger(__name__)``; handlers live on the
package root logger, configured once by ``configure_logging`` from ``create_app`` or a
script entry point.
"""
import logging
import sys

from .filters import RequestContextFilter
from .formatters import TEXT_FORMAT, AppLogsJSONFormatter

ROOT_LOGGER_NAME = "office_register"


def configure_logging(level: str = "INFO", fmt: str = "json", environment: str | None = None) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(AppLogsJSONFormatter(environment))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(RequestContextFilter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False
    return logger


def get_app_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
