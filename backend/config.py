import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog
from decouple import config

SECRET_KEY: str = config("SECRET_KEY")

ALGORITHM: str = config("ALGORITHM", default="HS256")

ACCESS_TOKEN_EXPIRE_MINUTES: int = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=30, cast=int)

DATABASE_URL: str = config("DATABASE_URL", default="sqlite:///./decks.db")

DEFAULT_PAGE_LIMIT: int = config("DEFAULT_PAGE_LIMIT", default=10, cast=int)

MAX_PAGE_LIMIT: int = config("MAX_PAGE_LIMIT", default=100, cast=int)

ENVIRONMENT: str = config("ENVIRONMENT", default="development")


def configure_logging(environment: str = ENVIRONMENT) -> None:
    """Configure stdlib logging and structlog. JSON output in production, console otherwise."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if environment == "development" else logging.INFO,
    )

    processors: list[Callable[..., Any]] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
