"""Logging setup and the operator alert channel."""

import logging
import logging.config

from ironlog.core.constants import ALERT_LOGGER_NAME

# Log shippers route this logger name to paging; it only ever carries CRITICAL records.
alert_logger = logging.getLogger(ALERT_LOGGER_NAME)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at startup."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
            },
            "handlers": {
                "console": {"class": "logging.StreamHandler", "formatter": "default"},
            },
            "root": {"handlers": ["console"], "level": level.upper()},
            "loggers": {
                ALERT_LOGGER_NAME: {"level": "CRITICAL"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
