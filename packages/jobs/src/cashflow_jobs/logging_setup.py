"""structlog setup for the job entry points."""

import logging

import structlog

from cashflow_core.exceptions import ConfigurationError


def configure_logging(level: str = "INFO", *, json: bool = False) -> None:
    """Install structlog processors filtering below ``level``.

    Args:
        level: Standard level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json: Render JSON lines instead of the console format.

    Raises:
        ConfigurationError: If the level name is unknown.
    """
    numeric_level = logging.getLevelName(level.upper().strip())
    if not isinstance(numeric_level, int):
        raise ConfigurationError(
            f"Unknown log level: {level}",
            config_key="CASHFLOW_LOG_LEVEL",
            expected="DEBUG, INFO, WARNING, ERROR or CRITICAL",
            actual=level,
        )

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
