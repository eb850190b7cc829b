"""Structured logging setup.

Every module obtains its logger with ``structlog.get_logger()`` and logs
snake_case events with keyword context. ``configure_logging`` installs
the processor chain once per process; the FastAPI factory and the CLI
both call it.
"""

import logging

import structlog

from orbit_rbac.config import Settings, settings


def configure_logging(config: Settings | None = None) -> None:
    """Configure structlog for the current process.

    Production renders JSON lines; every other environment uses the
    human-friendly console renderer.

    Args:
        config: Settings to read the log level and environment from
    """
    config = config or settings
    level = logging.getLevelNamesMapping().get(config.log_level, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if config.is_production
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = [
    "configure_logging",
]
