"""Logging utilities with rich console output.

All modules log through here so that poll progress, commit listings and
errors share one console.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Fetching origin/main...")
    logger.warning("High-water mark fell out of the shallow window")
    logger.error("Clone failed", exc_info=True)
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Shared console so log records and commit listings interleave cleanly
console = Console()
err_console = Console(stderr=True)


def _rich_handler(show_time: bool, show_path: bool) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("3 new commits for: https://github.com/git/git")
        3 new commits for: https://github.com/git/git
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger already configured
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time, show_path))

    # Records still propagate so pytest's caplog can capture them
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger for the whole application.

    Called once from the CLI entry point. Loggers created through
    get_logger() already print to the rich console; the root logger only
    carries the optional plain-text log file so records are not shown twice.

    Args:
        level: Logging level for the root logger and all notifier/common loggers
        log_file: Optional file path to also log to a file
    """
    level = level.upper()

    # Open the file first so a bad path leaves logging untouched
    file_handler = logging.FileHandler(log_file) if log_file else None

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if file_handler:
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)

    # Module loggers follow the configured level
    for name, existing in logging.Logger.manager.loggerDict.items():
        if isinstance(existing, logging.Logger) and name.startswith(("notifier", "common")):
            existing.setLevel(level)


def progress(message: str) -> None:
    """Print an operator-facing line without any logger prefix.

    Example:
        >>> progress("Fix typo in README")
        Fix typo in README
    """
    console.print(message, markup=False, highlight=False, soft_wrap=True)


def error(message: str) -> None:
    """Print an error line with a red X icon to stderr."""
    err_console.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)
