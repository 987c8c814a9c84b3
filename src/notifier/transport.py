"""Notification transports."""

import subprocess
from abc import ABC, abstractmethod
from html import escape

from common.constants import APP_NAME, NOTIFICATION_TIMEOUT_MS, NOTIFY_SEND_TIMEOUT
from common.logger import get_logger

from .errors import NotificationError

logger = get_logger(__name__)


def format_notification_body(subject: str, commit_url: str) -> str:
    """Build the notification body: subject plus a clickable commit link.

    Example:
        >>> format_notification_body("Fix typo", "https://github.com/git/git/commit/abc")
        'Fix typo <a href="https://github.com/git/git/commit/abc">commit link</a>'
    """
    return f'{escape(subject, quote=False)} <a href="{escape(commit_url)}">commit link</a>'


class Transport(ABC):
    """Base class for anything that can deliver a notification."""

    @abstractmethod
    def send(self, title: str, body: str) -> None:
        """Deliver one notification.

        Args:
            title: Notification title (the repository url)
            body: Notification body, may contain simple markup

        Raises:
            NotificationError: If delivery fails
        """
        pass


class DesktopTransport(Transport):
    """Freedesktop notifications through the notify-send command."""

    def __init__(
        self,
        app_name: str = APP_NAME,
        timeout_ms: int = NOTIFICATION_TIMEOUT_MS,
        command: str = "notify-send",
        send_timeout: float = NOTIFY_SEND_TIMEOUT,
    ):
        self.app_name = app_name
        self.timeout_ms = timeout_ms
        self.command = command
        self.send_timeout = send_timeout

    def send(self, title: str, body: str) -> None:
        args = [
            self.command,
            f"--app-name={self.app_name}",
            f"--expire-time={self.timeout_ms}",
            title,
            body,
        ]
        try:
            result = subprocess.run(args, capture_output=True, text=True, timeout=self.send_timeout)
        except subprocess.TimeoutExpired as e:
            raise NotificationError(
                f"{self.command} did not return within {self.send_timeout}s for {title}"
            ) from e
        except OSError as e:
            raise NotificationError(f"Could not run {self.command}: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise NotificationError(f"{self.command} failed for {title}: {detail}")


class LogTransport(Transport):
    """Logs notifications instead of displaying them (headless runs)."""

    def send(self, title: str, body: str) -> None:
        logger.info(f"Notification for {title}: {body}")
