"""
common.log_config
~~~~~~~~~~~~~~~~~
structlog wiring shared by every settings module.

Stdlib records and structlog events both go through
``structlog.stdlib.ProcessorFormatter`` and come out as one JSON object per
line on stderr.  The configuration engine (``apps.configuration``) has its
own level so loader events can be turned up without flooding the rest.
"""
import structlog

ENGINE_LOGGER = "apps.configuration"


def build_logging(level: str, *, engine_level: str | None = None) -> dict:
    """Return a ``LOGGING`` dict for Django's ``dictConfig`` call."""
    console = {"handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": structlog.processors.JSONRenderer(),
            },
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "json"},
        },
        "root": {"handlers": ["console"], "level": level.upper()},
        "loggers": {
            "django": {**console, "level": level.upper()},
            ENGINE_LOGGER: {**console, "level": (engine_level or level).upper()},
        },
    }


def configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
