import logging.config

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "[%(levelname)s] %(asctime)s %(name)s: %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        }
    },
    "loggers": {
        # Our own modules (homefood.services.builder, homefood.store.sql, ...)
        "homefood": {"handlers": ["console"], "level": "INFO", "propagate": False},
        # Keep SQLAlchemy quiet unless something goes wrong
        "sqlalchemy.engine": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}


def configure_logging(level: str = "INFO") -> None:
    config = {**LOGGING, "loggers": {k: dict(v) for k, v in LOGGING["loggers"].items()}}
    config["loggers"]["homefood"]["level"] = level.upper()
    logging.config.dictConfig(config)
