"""Logging setup for the CLI and the page builders."""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "blog_explorer"

# HTTP client loggers emit one INFO line per request
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """
    Send ``blog_explorer`` logs to stderr through Rich.

    Quiet runs only show warnings so command output on stdout stays clean.
    Verbose runs show debug output, including HTTP request logs, and copy
    everything to ``log_file`` when one is given.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Messages carry post and category titles, which may contain [brackets]
    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if verbose else logging.WARNING)

    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger under the ``blog_explorer`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """
    Context manager that times one build step.

    Lookup failures (an unknown slug) are expected and logged at INFO;
    anything else is logged as an error. Exceptions always propagate.
    """

    def __init__(self, logger: logging.Logger, context: str):
        self.logger = logger
        self.context = context
        self.elapsed_ms = 0.0
        self._started = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.debug(f"Building {self.context}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._started) * 1000
        if exc_type is None:
            self.logger.debug(f"Built {self.context} in {self.elapsed_ms:.1f} ms")
        elif issubclass(exc_type, LookupError):
            self.logger.info(f"{self.context}: {exc_val}")
        else:
            self.logger.error(f"Failed to build {self.context}: {exc_val}")
        return False
