"""Logging setup for the boardsync namespace."""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbose: int = 0, log_file: Path | None = None, stderr: bool = True) -> None:
    """Attach handlers to the ``boardsync`` logger.

    Silent unless ``verbose`` (1=INFO, 2+=DEBUG) or ``log_file`` is given.
    ``stderr=False`` keeps output off the terminal while the TUI owns it.
    """
    if verbose == 0 and log_file is None:
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger = logging.getLogger("boardsync")
    logger.setLevel(level)

    handlers: list[logging.Handler] = []
    if verbose > 0 and stderr:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Request lines from httpx only at DEBUG
    logging.getLogger("httpx").setLevel(level if level == logging.DEBUG else logging.WARNING)

    logger.info("boardsync starting (level=%s)", logging.getLevelName(level))
