"""Console logging setup for applications embedding the pipeline."""

import logging
import logging.config


def configure_logging(level: str = "INFO") -> None:
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "plain",
                "level": level.upper(),
            },
        },
        "loggers": {
            "cityinsight": {
                "level": level.upper(),
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }
    logging.config.dictConfig(config)
    logging.captureWarnings(True)
