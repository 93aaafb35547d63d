from __future__ import annotations

import logging
import os
from typing import Optional, Dict, Any


DEFAULT_LEVEL = os.getenv("SMS_PILOT_LOG_LEVEL", "INFO")


def get_logger(name: str = "sms_pilot", level: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``sms_pilot`` namespace.

    Handlers are attached only on first use, so repeated clients share one
    console handler. The level comes from ``SMS_PILOT_LOG_LEVEL`` unless
    given explicitly.
    """

    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, (level or DEFAULT_LEVEL).upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Log a client event with optional context appended as ``extra=``.

    Args:
        logger: Logger instance from ``get_logger``.
        level: Logging level from ``logging`` (e.g., logging.WARNING).
        message: Human-readable message.
        extra: Context such as phone, status code or error text. Never the API key.
    """

    if not extra:
        logger.log(level, message)
    else:
        logger.log(level, f"{message} | extra={extra}")


def mask_secret(text: Optional[str], secret: str) -> Optional[str]:
    """Replace every occurrence of ``secret`` in ``text`` with a short mask."""

    if not text or not secret:
        return text
    visible = secret[:4] if len(secret) > 8 else ""
    return text.replace(secret, f"{visible}***")
