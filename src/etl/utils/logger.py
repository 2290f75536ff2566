"""Logger factory for the sync process.

Each named logger writes to stdout and, unless LOG_TO_FILE is off,
to its own file stamped with the current date, e.g.
``logs/etl_sync_20240501.log``.
"""

import logging
import sys
from datetime import date
from pathlib import Path

from src.settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured: dict[str, logging.Logger] = {}


def setup_logger(
    name: str,
    level: int | None = None,
    log_dir: Path | None = None,
) -> logging.Logger:
    """Return the named logger, configuring it on first use.

    Later calls with the same name return the configured instance
    unchanged, whatever arguments they pass.

    Args:
        name: Logger name (e.g., 'etl.sync').
        level: Logging level (default from LOG_LEVEL).
        log_dir: Log file directory. Passing one forces a file
            handler even when LOG_TO_FILE is off.

    Returns:
        Logger that does not propagate to the root logger.
    """
    if name in _configured:
        return _configured[name]

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(settings.logging.level_number if level is None else level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    for handler in _build_handlers(name, log_dir):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _configured[name] = logger
    return logger


def log_file_path(name: str, log_dir: Path | None = None, day: date | None = None) -> Path:
    """Dated log file of a logger, creating its directory.

    Args:
        name: Logger name; dots become underscores.
        log_dir: Directory (default from LOG_DIR).
        day: Date stamped in the filename (default today).

    Returns:
        Log file path.
    """
    directory = settings.logging.log_path if log_dir is None else log_dir
    directory.mkdir(parents=True, exist_ok=True)

    stamp = (day or date.today()).strftime("%Y%m%d")
    return directory / f"{name.replace('.', '_')}_{stamp}.log"


def _build_handlers(name: str, log_dir: Path | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_dir is None and not settings.logging.to_file:
        return handlers

    try:
        handlers.append(logging.FileHandler(log_file_path(name, log_dir), encoding="utf-8"))
    except OSError as e:
        print(f"Warning: no log file for {name}: {e}", file=sys.stderr)

    return handlers
