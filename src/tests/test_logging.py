import logging
import pytest
from unittest.mock import MagicMock

from user_analytics.core.logging_config import APP_LOGGER_NAME, NamespaceFilter, configure_logging

# List of loggers to manage during tests
LOGGERS_TO_MANAGE = [
    APP_LOGGER_NAME,
    "user_analytics.features.analytics",
    "user_analytics.features.auth",
    "user_analytics.features.analytics.service",
    "user_analytics.features.auth.router",
    "user_analytics.main",
]


def _reset_loggers():
    for logger_name in LOGGERS_TO_MANAGE:
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.filters = []
        logger.setLevel(logging.NOTSET)
    logging.getLogger(APP_LOGGER_NAME).__dict__.pop("_configured", None)


@pytest.fixture
def logging_env():
    """
    A pytest fixture to set up and tear down a controlled logging environment for tests.

    This fixture provides a mock handler and ensures that loggers are clean
    before and after each test, preventing interference between them.

    Yields:
        MagicMock: A mock logging handler to inspect calls and logged messages.
    """
    test_handler = MagicMock()
    # Add required attributes for a handler
    test_handler.level = logging.NOTSET
    test_handler.filters = []

    def add_filter(filter_obj):
        test_handler.filters.append(filter_obj)
        return filter_obj

    # Define handle method that applies filters and tracks accepted records
    accepted_records = []
    def handle(record):
        for f in test_handler.filters:
            if not f.filter(record):
                return False  # Skip this record if any filter rejects it
        accepted_records.append(record)
        return True

    test_handler.addFilter = MagicMock(side_effect=add_filter)
    test_handler.handle = MagicMock(side_effect=handle)
    test_handler.accepted_records = accepted_records

    _reset_loggers()
    yield test_handler
    _reset_loggers()


def _setup_logger(name, level, handler_to_add):
    """Helper function to configure a logger for testing."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = [handler_to_add]
    logger.propagate = True
    return logger

def get_handled_messages(test_handler: MagicMock) -> list[str]:
    """Extracts formatted log messages from the mock handler's accepted records."""
    return [f"{r.name}:{r.levelname}:{r.getMessage()}" for r in test_handler.accepted_records]

def test_default_level_propagation(logging_env):
    """
    Tests that child loggers correctly inherit the logging level from the package logger.
    """
    _setup_logger(APP_LOGGER_NAME, logging.INFO, logging_env)

    analytics_logger = logging.getLogger("user_analytics.features.analytics")
    auth_logger = logging.getLogger("user_analytics.features.auth")

    analytics_logger.debug("Report query debug")  # Should be ignored
    analytics_logger.info("Report info")   # Should be handled
    auth_logger.warning("Auth warning") # Should be handled

    handled_messages = get_handled_messages(logging_env)
    assert "user_analytics.features.analytics:DEBUG:Report query debug" not in handled_messages
    assert "user_analytics.features.analytics:INFO:Report info" in handled_messages
    assert "user_analytics.features.auth:WARNING:Auth warning" in handled_messages

def test_namespace_specific_level(logging_env):
    """
    Tests that a specific namespace can have its own logging level (e.g., DEBUG)
    that overrides the parent's level (e.g., INFO).
    """
    _setup_logger(APP_LOGGER_NAME, logging.INFO, logging_env)
    _setup_logger("user_analytics.features.analytics", logging.DEBUG, logging_env)

    logging.getLogger("user_analytics.features.analytics").debug("Report query")
    logging.getLogger("user_analytics.features.auth").debug("Token debug")

    handled_messages = get_handled_messages(logging_env)
    assert "user_analytics.features.analytics:DEBUG:Report query" in handled_messages
    assert "user_analytics.features.auth:DEBUG:Token debug" not in handled_messages

def test_namespace_filter_allow(logging_env):
    """
    Tests that the NamespaceFilter correctly allows messages from a specified
    namespace while blocking others.
    """
    _setup_logger(APP_LOGGER_NAME, logging.DEBUG, logging_env)
    logging_env.addFilter(NamespaceFilter(allowed_namespaces=["user_analytics.features.analytics"]))

    logging.getLogger("user_analytics.features.analytics.service").info("Overview built")
    logging.getLogger("user_analytics.features.auth.router").info("User logged in")
    logging.getLogger("user_analytics.main").info("Starting application")

    handled_messages = get_handled_messages(logging_env)
    assert "user_analytics.features.analytics.service:INFO:Overview built" in handled_messages
    assert "user_analytics.features.auth.router:INFO:User logged in" not in handled_messages
    assert "user_analytics.main:INFO:Starting application" not in handled_messages

def test_namespace_filter_allow_all_if_empty(logging_env):
    """
    Tests that the NamespaceFilter allows all messages if the list of allowed
    namespaces is empty.
    """
    _setup_logger(APP_LOGGER_NAME, logging.DEBUG, logging_env)
    logging_env.addFilter(NamespaceFilter(allowed_namespaces=[]))

    logging.getLogger("user_analytics.features.analytics").info("Analytics message")
    logging.getLogger("user_analytics.features.auth").info("Auth message")

    handled_messages = get_handled_messages(logging_env)
    assert "user_analytics.features.analytics:INFO:Analytics message" in handled_messages
    assert "user_analytics.features.auth:INFO:Auth message" in handled_messages

def test_configure_logging_is_idempotent(logging_env):
    logger = configure_logging(level="WARNING", namespaces=["user_analytics.features.auth"])
    configure_logging(level="WARNING")

    assert logger.name == APP_LOGGER_NAME
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
    namespace_filters = [f for f in logger.handlers[0].filters if isinstance(f, NamespaceFilter)]
    assert namespace_filters[0].allowed_namespaces == ["user_analytics.features.auth"]
