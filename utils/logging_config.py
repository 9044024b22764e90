from __future__ import annotations

import logging
from typing import Any

from utils.app_settings import AppSettings


def _parse_level(value: Any, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip().upper()
    if not text:
        return default
    level = logging.getLevelName(text)
    if isinstance(level, int):
        return level
    try:
        return int(text)
    except ValueError:
        return default


def configure_logging(settings: AppSettings, *, override_level: str | None = None) -> None:
    """Configure console logging for the chat server.

    Safe to call more than once; existing root handlers are replaced.
    """
    level = _parse_level(override_level or settings.log_level, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=settings.log_format or None))

    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)

    # uvicorn's access log repeats every websocket upgrade
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))

    logging.captureWarnings(True)
