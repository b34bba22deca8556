"""Logging for the checkout service.

Records go through stdlib handlers: stdout, `checkout.log`, and
`checkout_error.log` for errors only. structlog renders them, as JSON in
production and staging and as colored console output elsewhere.

Checkout and payment handling bind the cart and order they work on with
`bound_to()`, so every line logged inside, including the ones from the
gateway adapters, carries those ids. Secrets that reach a log call are masked.
"""

import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog

LOG_FILE = "checkout.log"
ERROR_LOG_FILE = "checkout_error.log"

NOISY_LOGGERS = ("protean", "stripe", "urllib3", "asyncio")

SECRET_KEYS = frozenset({"api_key", "webhook_secret", "signature", "stripe-signature", "x-gateway-signature"})

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO")).upper()


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str | Path = "logs") -> None:
    level = get_log_level()
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating(log_dir / LOG_FILE, level),
        _rotating(log_dir / ERROR_LOG_FILE, logging.ERROR),
    ]

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def mask_secrets(_, __, event_dict: dict) -> dict:
    """structlog processor: never write signing material or API keys."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def _renderer():
    if _environment() in ("production", "staging"):
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            mask_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: str | Path = "logs") -> None:
    setup_stdlib_logging(log_dir)
    setup_structlog()


@contextmanager
def bound_to(**ids) -> Iterator[None]:
    """Tag log lines inside the block with the given ids (`order_id`, `cart_id`, ...).

    Ids that are None are skipped. Values bound by an enclosing block are
    restored on exit.
    """
    ids = {key: str(value) for key, value in ids.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**ids):
        yield
