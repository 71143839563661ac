"""
Logging for a lazyomz run.

The CLI maps its flags to a verbosity and calls ``setup_logging`` once.
Verbosity 0 falls back to ``LAZYOMZ_LOG_LEVEL`` (default WARNING), so a
plain run only shows problems; the step lines printed by the CLI are the
normal output.

    -1  --quiet     ERROR
     0  (none)      LAZYOMZ_LOG_LEVEL or WARNING
     1  --verbose   INFO, every step and command
     2  --debug     DEBUG, with logger names

A log file, when requested, gets its own level from
``LAZYOMZ_LOG_FILE_LEVEL`` (default DEBUG) so a quiet console can still
leave a full transcript behind.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

_VERBOSITY_LEVELS = {-1: logging.ERROR, 1: logging.INFO, 2: logging.DEBUG}

_CONSOLE_FMT = {
    logging.DEBUG: "%(levelname)-5s %(name)s: %(message)s",
    logging.INFO: "   %(message)s",
}
_FILE_FMT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"


def console_level(verbosity: int, environ: Mapping[str, str] | None = None) -> int:
    """Console level for a CLI verbosity, honouring ``LAZYOMZ_LOG_LEVEL`` at 0."""
    if verbosity in _VERBOSITY_LEVELS:
        return _VERBOSITY_LEVELS[verbosity]
    if verbosity > 2:
        return logging.DEBUG
    env = os.environ if environ is None else environ
    return _parse_level(env.get("LAZYOMZ_LOG_LEVEL"), logging.WARNING)


def setup_logging(
    verbosity: int = 0,
    log_file: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> None:
    """Install a stderr handler and, optionally, a file handler on the root logger."""
    env = os.environ if environ is None else environ
    level = console_level(verbosity, env)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FMT.get(level, "%(message)s")))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = level

    if log_file:
        file_level = _parse_level(env.get("LAZYOMZ_LOG_FILE_LEVEL"), logging.DEBUG)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FMT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)


def _parse_level(name: str | None, default: int) -> int:
    if not name:
        return default
    numeric = logging.getLevelName(name.upper())
    return numeric if isinstance(numeric, int) else default
