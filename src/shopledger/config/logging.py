"""Logging setup: structlog rendering for the stdlib ``shopledger`` logger.

Modules log through ``logging.getLogger(__name__)``; structlog's
ProcessorFormatter turns those records into console lines or JSON lines
(``--log-json``) on stderr. Every line carries the shop name, and customer
phone numbers inside messages are masked to their last three digits.

Levels for the ``shopledger`` logger:

======================  =========
``-v``                  DEBUG
default                 WARNING
``-q``                  ERROR
======================  =========
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

import structlog

# Libraries that log every statement or hook call at INFO/DEBUG.
_NOISY_LOGGERS = ("sqlalchemy", "pluggy")

# A run of digits with optional phone punctuation, not glued to an id.
_PHONE_RUN = re.compile(r"(?<![\w])[+(]?\d[\d\s\-()]{5,}\d(?![\w])")
_MIN_PHONE_DIGITS = 9
_VISIBLE_DIGITS = 3


def mask_phone(match: re.Match[str]) -> str:
    """Replace a phone-like run with ``*`` for all but its last digits."""
    raw = match.group(0)
    digits = re.sub(r"\D", "", raw)
    if len(digits) < _MIN_PHONE_DIGITS:
        return raw
    hidden = len(digits) - _VISIBLE_DIGITS
    return "*" * hidden + digits[hidden:]


def mask_phone_numbers(
    _logger: Any, _method: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """structlog processor: mask phone numbers in the event message."""
    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = _PHONE_RUN.sub(mask_phone, event)
    return event_dict


def shop_log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    quiet: bool = False,
    shop_name: str | None = None,
) -> None:
    """Route shopledger logging to stderr through structlog.

    Args:
        verbose: DEBUG output for the ``shopledger`` logger.
        log_json: JSON lines instead of the console renderer.
        quiet: Only errors (ignored when *verbose* is set).
        shop_name: Bound as ``shop`` on every log line.
    """
    structlog.contextvars.clear_contextvars()
    if shop_name:
        structlog.contextvars.bind_contextvars(shop=shop_name)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_phone_numbers,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("shopledger").setLevel(shop_log_level(verbose=verbose, quiet=quiet))
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
