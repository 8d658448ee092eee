# logging_config.py
# Decides where the 'radialmap.*' loggers write. The command line hands its
# --log-level and --log-file values straight to setup_logging.

import logging
import sys
from pathlib import Path

LOGGER_NAME = "radialmap"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def parse_level(level):
    """Accepts a logging constant or a level name such as 'debug'."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _attach(logger, handler, level, formatter):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(level=logging.INFO, log_file=None):
    """
    Points the 'radialmap' logger at stdout and, optionally, a log file
    (appended to, parent folders created). Calling it again replaces the
    previous handlers and closes their files.
    """
    level = parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    _attach(logger, logging.StreamHandler(sys.stdout), level, formatter)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _attach(logger, logging.FileHandler(path, mode="a", encoding="utf-8"), level, formatter)

    logger.debug("Logging at %s%s", logging.getLevelName(level), f", copy in {log_file}" if log_file else "")
    return logger
