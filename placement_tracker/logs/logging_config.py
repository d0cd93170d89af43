import logging
import logging.config

from placement_tracker.core.config import settings

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "placement_tracker": {
            "handlers": ["console"],
            "level": settings.log_level.upper(),
            "propagate": True,
        },
        "uvicorn.access": {
            "level": "WARNING",
        },
    },
}


def setup_logging() -> logging.Logger:
    logging.config.dictConfig(LOGGING_CONFIG)
    return logging.getLogger("placement_tracker")


logger = setup_logging()
