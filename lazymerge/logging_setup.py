"""File logging for interactive sessions.

The terminal belongs to the UI, so records go to a rotating log file in the
user log directory instead of stderr.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

LOG_FILENAME = "lazymerge.log"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def default_log_path() -> Path:
    return Path(user_log_dir("lazymerge", appauthor=False)) / LOG_FILENAME


def configure_logging(log_file: Path | None = None, debug: bool = False) -> Path | None:
    """Attach one rotating file handler to the ``lazymerge`` logger.

    Returns the log path, or ``None`` when the file cannot be opened (logging
    is then disabled for the run). Calling this twice does not add a second
    handler.
    """
    logger = logging.getLogger("lazymerge")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False
    for handler in logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)

    path = log_file if log_file is not None else default_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
            errors="backslashreplace",
        )
    except OSError:
        logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return path
