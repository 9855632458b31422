"""Standard library logging setup.

Logfire carries spans and structured events; plain ``logging`` is kept for
uvicorn, the drivers and the few modules that log without attributes.
"""

import logging
import sys

from roam.config import Settings

_ENVIRONMENT_LEVELS = {
    "production": logging.WARNING,
    "staging": logging.INFO,
    "development": logging.INFO,
    "test": logging.WARNING,
}

# Drivers that log every command or connection at INFO
_NOISY_LOGGERS = ("asyncpg", "redis", "sqlalchemy.engine", "uvicorn.access")


def setup_logging(settings: Settings) -> None:
    """Configure the root logger for the current environment."""
    level = logging.DEBUG if settings.debug else _ENVIRONMENT_LEVELS[settings.environment]

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info(
        "Logging configured for %s at %s",
        settings.environment,
        logging.getLevelName(level),
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
