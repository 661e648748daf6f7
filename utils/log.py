# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Trellis — Optimizers & Learning-Rate Schedules                      ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""trellis.utils.log — Logger setup for the ``trellis`` namespace.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves.  Applications that want to see the
messages (for example the ``verbose=True`` scheduler output) call
:func:`get_logger` once, which attaches a stdout handler to the
package logger.

Environment variables:
    TRELLIS_LOG_LEVEL   — default level name (DEBUG, INFO, WARNING,
                          ERROR, CRITICAL).  Defaults to WARNING.
"""
from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER_NAME = 'trellis'
LOG_LEVEL_ENV = 'TRELLIS_LOG_LEVEL'
LOG_FORMAT = '[trellis] %(levelname)s %(name)s: %(message)s'

_VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def resolve_log_level(level: str | int | None = None) -> int:
    """Turn a level name (or ``None`` → environment) into a logging constant."""
    if isinstance(level, int):
        return level
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, 'WARNING')
    upper = level.strip().upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level}'. Must be one of: "
            f"{', '.join(_VALID_LOG_LEVELS)}")
    return getattr(logging, upper)


def get_logger(name: str = ROOT_LOGGER_NAME,
               level: str | int | None = None) -> logging.Logger:
    """Return a logger under the ``trellis`` hierarchy with output enabled.

    The stdout handler lives on the package logger, so child loggers
    (``trellis.optim.lr_scheduler`` etc.) share it.  Calling this more
    than once only adjusts the level.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(resolve_log_level(level))

    if not any(getattr(h, '_trellis_handler', False) for h in root.handlers):
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._trellis_handler = True
        root.addHandler(handler)

    return logging.getLogger(name)


__all__ = ['get_logger', 'resolve_log_level', 'LOG_LEVEL_ENV',
           'ROOT_LOGGER_NAME']
