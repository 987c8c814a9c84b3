"""Environment configuration interface for git-notifier.

This module provides a clean interface for accessing environment variables,
centralizing all environment variable access in one place. Command-line
flags take precedence over these values.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from common.constants import (
    DEFAULT_HISTORY_DEPTH,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_THROTTLE_BUDGET,
    DEFAULT_THROTTLE_WINDOW,
)

# Load environment variables from .env file if it exists
load_dotenv()


def _int_from_env(name: str, default: int, minimum: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def history_depth() -> int:
        """Get the shallow clone depth.

        Returns:
            Number of commits kept per clone, defaults to 50
        """
        return _int_from_env("NOTIFIER_HISTORY_DEPTH", DEFAULT_HISTORY_DEPTH, minimum=1)

    @staticmethod
    def poll_interval() -> int:
        """Get the delay between poll cycles.

        Returns:
            Seconds to wait between cycles, defaults to 150
        """
        return _int_from_env("NOTIFIER_POLL_INTERVAL", DEFAULT_POLL_INTERVAL, minimum=1)

    @staticmethod
    def throttle_window() -> int:
        """Get the notification throttle window.

        Returns:
            Window length in seconds, defaults to 5
        """
        return _int_from_env("NOTIFIER_THROTTLE_WINDOW", DEFAULT_THROTTLE_WINDOW, minimum=0)

    @staticmethod
    def throttle_budget() -> int:
        """Get the number of notifications allowed per throttle window.

        Returns:
            Notification budget, defaults to 5
        """
        return _int_from_env("NOTIFIER_THROTTLE_BUDGET", DEFAULT_THROTTLE_BUDGET, minimum=0)

    @staticmethod
    def workdir() -> Path | None:
        """Get the parent directory for temporary clones.

        Returns:
            Directory path, or None to use the system temp directory
        """
        value = os.getenv("NOTIFIER_WORKDIR")
        return Path(value) if value else None

    @staticmethod
    def log_level() -> str:
        """Get the logging level.

        Returns:
            Level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()
