"""
Logging configuration — set up once by the CLI entry point.

Every module does ``logger = logging.getLogger(__name__)`` and inherits
this config.  Log records go to stderr; the colored status lines the
user sees are printed separately by the CLI and do not depend on the
log level.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  MINTAS_LOG_LEVEL  >  WARNING

MINTAS_LOG_FILE adds a file handler, at MINTAS_LOG_FILE_LEVEL if set and
at the console level otherwise.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "MINTAS_LOG_LEVEL"
LOG_FILE_ENV = "MINTAS_LOG_FILE"
LOG_FILE_LEVEL_ENV = "MINTAS_LOG_FILE_LEVEL"

# (threshold, format, datefmt): first threshold the level is at or below wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_FORMAT_PLAIN = "%(levelname)s: %(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(process)d] %(name)s - %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(level: str = "WARNING", environ: Mapping[str, str] | None = None) -> None:
    """Replace the root logger's handlers with the installer's.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        environ: Where to read MINTAS_LOG_FILE / MINTAS_LOG_FILE_LEVEL;
            defaults to ``os.environ``.
    """
    env = os.environ if environ is None else environ
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    log_file = env.get(LOG_FILE_ENV, "").strip()
    file_error: OSError | None = None
    if log_file:
        file_level = _parse_level(env.get(LOG_FILE_LEVEL_ENV) or level)
        try:
            handlers.append(_file_handler(log_file, file_level))
        except OSError as e:
            file_error = e

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    if file_error is not None:
        root.warning("Cannot write log file %s: %s", log_file, file_error)


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_FORMAT_PLAIN, None
    for threshold, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate, candidate_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown or empty means WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else None
    return numeric if isinstance(numeric, int) else logging.WARNING
