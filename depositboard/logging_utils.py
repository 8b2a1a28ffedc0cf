"""Mini README: Application-wide logging helpers for the deposit board.

Structure:
    * level_for_environment - maps the configured environment to a level.
    * configure_root_logger - installs the shared handler, applies a level.
    * get_logger - module logger factory used across the package.

Usage:
    Modules call ``get_logger(__name__)`` at import time, which installs the
    stream handler at INFO. The CLI and the web factory then call
    ``configure_root_logger(level_for_environment(settings.environment))``
    so a ``development`` deployment logs ledger reads and sink churn at
    DEBUG. The handler is attached once per process, so uvicorn reloads and
    repeated test imports never duplicate output lines.
"""

from __future__ import annotations

import logging
from typing import Optional

_SHARED_HANDLER: Optional[logging.Handler] = None

DEBUG_ENVIRONMENTS = frozenset({"development", "dev", "local"})


def level_for_environment(environment: str) -> int:
    """DEBUG for development-style environments, INFO everywhere else."""

    return logging.DEBUG if environment.strip().lower() in DEBUG_ENVIRONMENTS else logging.INFO


def configure_root_logger(level: Optional[int] = None) -> None:
    """Attach the shared handler once; an explicit ``level`` is always applied."""

    global _SHARED_HANDLER
    root_logger = logging.getLogger()
    if _SHARED_HANDLER is None:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO if level is None else level)
        _SHARED_HANDLER = handler
    elif level is not None:
        root_logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger, installing the shared handler on first use."""

    configure_root_logger()
    return logging.getLogger(name)
