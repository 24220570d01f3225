"""
Logging for the buildlayout CLI.

The console level comes from the global flags, falling back to
``BLC_LOG_LEVEL`` and then WARNING. ``BLC_LOG_FILE`` adds a file
handler, optionally at its own ``BLC_LOG_FILE_LEVEL``.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "BLC_LOG_LEVEL"
LOG_FILE_ENV = "BLC_LOG_FILE"
LOG_FILE_LEVEL_ENV = "BLC_LOG_FILE_LEVEL"

# Console formats by the most verbose level they cover
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
]

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s  %(message)s"


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    """Map a level name (any case) to its number; unknown names give ``default``."""
    if not name:
        return default
    return logging.getLevelNamesMapping().get(name.strip().upper(), default)


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> int:
    """Console level for the global flags. ``--debug`` beats ``-v`` beats ``-q``."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    env = os.environ if env is None else env
    return parse_level(env.get(LOG_LEVEL_ENV))


def setup_logging(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> int:
    """Install the console (and optional file) handler on the root logger.

    Returns:
        The console level in effect.
    """
    env = os.environ if env is None else env
    level = resolve_level(debug, verbose, quiet, env)

    fmt, datefmt = next((f, d) for lvl, f, d in _CONSOLE_FORMATS if level <= lvl)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = level

    log_file = env.get(LOG_FILE_ENV)
    if log_file:
        file_level = parse_level(env.get(LOG_FILE_LEVEL_ENV), default=level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)
    return level
