import logging
import sys
from typing import Optional

from .config import LOG_LEVEL, LOG_NAMESPACES

APP_LOGGER_NAME = "user_analytics"


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, namespaces: Optional[list[str]] = None) -> logging.Logger:
    """
    Configures the package logger once and returns it.

    Modules log through logging.getLogger(__name__), which creates loggers like
    "user_analytics.features.analytics.service". Those inherit the level and
    handler configured here unless a namespace sets its own level.
    """
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level)

    if getattr(app_logger, "_configured", False):
        return app_logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)

    # Only pass records from the listed namespaces, e.g. LOG_NAMESPACES="user_analytics.features.auth"
    allowed = LOG_NAMESPACES if namespaces is None else namespaces
    if allowed:
        console_handler.addFilter(NamespaceFilter(allowed))

    app_logger.addHandler(console_handler)
    app_logger._configured = True
    return app_logger


# To print the SQL sent by Tortoise while debugging a report:
# logging.getLogger("tortoise.db_client").setLevel(logging.DEBUG)
