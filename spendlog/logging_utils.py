"""Mini README: Logging helpers shared across spendlog.

Structure:
    * configure_root_logger - installs one stream handler on the root logger.
    * get_logger - module logger factory that guarantees baseline setup.

Modules call ``get_logger(__name__)`` at import time. The CLI launcher calls
``configure_root_logger`` with the configured level before starting the
server; repeat calls only adjust the level and never stack handlers.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
_handler: Optional[logging.Handler] = None


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the spendlog handler to the root logger and set its level."""

    global _handler
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _handler is not None:
        return

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger, configuring the root logger on first use."""

    if _handler is None:
        configure_root_logger()
    return logging.getLogger(name)
