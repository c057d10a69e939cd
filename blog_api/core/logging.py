import logging
import sys
from typing import Optional

import structlog


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure stdlib logging and structlog to emit JSON to stdout.

    Called once from the application lifespan so that uvicorn, SQLAlchemy
    and our own structlog loggers share one formatter.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    processor_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=[timestamper, structlog.stdlib.add_log_level],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(processor_formatter)

    root = logging.getLogger()
    root.handlers = []
    root.addHandler(handler)
    root.setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            timestamper,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    """Return a structlog logger for the given name.

    Components take a logger in their constructor and fall back to
    `get_logger(__name__)` when none is passed down.
    """
    return structlog.get_logger(name)
