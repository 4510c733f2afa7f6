"""Logging setup for the miner.

Every module logs through a child of the ``data-miner`` logger. The CLI and
MCP entry points call :func:`configure_logging` once; library code never
configures handlers itself.

Usage:
    from data_miner.core.log import get_logger
    logger = get_logger(__name__)
    logger.warning("Class %s found multiple times", name)
"""

import logging
import sys

from .config import DEBUG

ROOT_LOGGER_NAME = "data-miner"


def get_logger(module_name: str = None) -> logging.Logger:
    """Return the shared logger, or a child named after a module."""
    if not module_name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    short = module_name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{short}")


class LogCounter(logging.Handler):
    """Counts warnings and errors for the end-of-run summary."""

    def __init__(self):
        super().__init__(level=logging.WARNING)
        self.warnings = 0
        self.errors = 0

    def emit(self, record: logging.LogRecord) -> None:
        # Handler.handle() already holds self.lock here
        if record.levelno >= logging.ERROR:
            self.errors += 1
        else:
            self.warnings += 1

    def reset(self) -> None:
        self.acquire()
        try:
            self.warnings = 0
            self.errors = 0
        finally:
            self.release()


def configure_logging(debug: bool = None, stream=None) -> LogCounter:
    """Configure root logging and attach a fresh counter to the miner logger."""
    if debug is None:
        debug = DEBUG
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s %(levelname)s: %(message)s",
            stream=stream or sys.stderr,
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(levelname)s: %(message)s",
            stream=stream or sys.stderr,
        )

    root = get_logger()
    for handler in list(root.handlers):
        if isinstance(handler, LogCounter):
            root.removeHandler(handler)
    counter = LogCounter()
    root.addHandler(counter)
    return counter
