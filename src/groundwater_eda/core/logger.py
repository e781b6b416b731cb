"""
Logging configuration for the groundwater EDA pipeline.

Console output stays at the configured console level while the log file
records every page request and cache decision at DEBUG.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

# Third-party loggers that would otherwise repeat every paged request
NOISY_LIBRARIES = ("urllib3", "requests", "pyproj")

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(name: Optional[str], default: int) -> int:
    if not name:
        return default
    return getattr(logging, str(name).upper(), default)


def setup_logger(
    name: str = "groundwater_eda",
    log_file: Optional[str] = None,
    log_level: str = "INFO",
    console_level: Optional[str] = None,
    library_level: str = "WARNING",
    libraries: Iterable[str] = NOISY_LIBRARIES
) -> logging.Logger:
    """
    Set up the pipeline logger with console and file handlers.

    Args:
        name: Logger name
        log_file: Path to log file. If None, uses LOG_FILE env var or default
        log_level: Level of the pipeline logger itself
        console_level: Console handler level; defaults to log_level
        library_level: Level applied to HTTP and projection library loggers
        libraries: Names of the library loggers to quiet

    Returns:
        Configured logger instance
    """
    if log_file is None:
        log_file = os.getenv("LOG_FILE", "logs/groundwater_eda.log")

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(_level(log_level, logging.INFO))

    # Re-running setup (one app per CLI call, many in tests) must not stack handlers
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(_level(console_level or log_level, logging.INFO))
    console_handler.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    logger.propagate = False

    for library in libraries:
        logging.getLogger(library).setLevel(_level(library_level, logging.WARNING))

    return logger


class LoggerContext:
    """
    Time a named load and report what it produced.

    Counts recorded with ``record`` are appended to the completion line,
    e.g. ``Completed nitrato point load in 1.20s (rows=2500, points=41)``.
    """

    def __init__(self, logger: logging.Logger, operation: str):
        """
        Initialize logger context.

        Args:
            logger: Logger instance
            operation: Name of the operation being logged
        """
        self.logger = logger
        self.operation = operation
        self.start_time: Optional[datetime] = None
        self.counts: Dict[str, Any] = {}

    def record(self, **counts: Any) -> None:
        """Attach counts to the completion message."""
        self.counts.update(counts)

    def _summary(self) -> str:
        if not self.counts:
            return ""
        return " (" + ", ".join(f"{k}={v}" for k, v in self.counts.items()) + ")"

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.info(f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = (datetime.now() - self.start_time).total_seconds()

        if exc_type is not None:
            self.logger.error(
                f"Failed {self.operation} after {duration:.2f}s: {exc_val}",
                exc_info=True
            )
            return False

        self.logger.info(f"Completed {self.operation} in {duration:.2f}s{self._summary()}")
        return False
