"""Helpers for configuring consistent project logging output."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "COMPUTER_POET_LOG_LEVEL"

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_CONFIGURED = False


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    try:
        return int(level)
    except (TypeError, ValueError):
        normalized = str(level).strip().upper()
        return getattr(logging, normalized, logging.INFO)


def configure_logging(level: Optional[str | int] = None, *, force: bool = False) -> None:
    """Initialise root logging handlers for the poet.

    The command-line tool and the Gradio UI both call this before building the
    application so template fallbacks and store loads show up on stderr. The
    level comes from ``level`` or ``COMPUTER_POET_LOG_LEVEL`` and defaults to
    ``INFO``.
    """

    global _CONFIGURED

    if _CONFIGURED and not force:
        return

    env_level = os.environ.get(LOG_LEVEL_ENV)
    resolved_level = _resolve_level(level if level is not None else env_level)

    logging.basicConfig(level=resolved_level, format=_DEFAULT_FORMAT, force=force)
    logging.getLogger("computer_poet").setLevel(resolved_level)
    _CONFIGURED = True


__all__ = ["LOG_LEVEL_ENV", "configure_logging"]
