"""
Poll configured repositories and notify about new commits.

Each cycle walks the repositories in configuration order: clone on first
sight, fetch afterwards, list what is new, print every new commit and send
a desktop notification for as many as the throttle allows. Cycles repeat
until the stop event is set.
"""

import threading
from collections.abc import Sequence

from common.logger import get_logger, progress

from .errors import NotificationError
from .models import Commit
from .repository import Repository
from .throttle import Throttle
from .transport import Transport, format_notification_body
from .workspace import Workspace

logger = get_logger(__name__)


class PollLoop:
    """Drives repositories through clone/fetch/poll and fans out notifications."""

    def __init__(
        self,
        repositories: Sequence[Repository],
        throttle: Throttle,
        transport: Transport,
        workspace: Workspace,
        history_depth: int,
        poll_interval: float,
        stop_event: threading.Event | None = None,
    ):
        self.repositories = list(repositories)
        self.throttle = throttle
        self.transport = transport
        self.workspace = workspace
        self.history_depth = history_depth
        self.poll_interval = poll_interval
        self.stop_event = stop_event or threading.Event()

    def run(self) -> None:
        """Poll until the stop event is set.

        Raises:
            NotifierError: The first clone, fetch or poll failure; no retries
        """
        cycle = 0
        while not self.stop_event.is_set():
            cycle += 1
            logger.debug(f"Starting poll cycle {cycle}")
            self.run_cycle()
            # Sleeps the full interval unless a stop is requested meanwhile
            self.stop_event.wait(self.poll_interval)
        logger.info("Stopped polling")

    def run_cycle(self) -> dict[str, int]:
        """Poll every repository once.

        Returns:
            Number of new commits per repository url, for the repositories
            reached before a stop request
        """
        counts: dict[str, int] = {}
        for repo in self.repositories:
            if self.stop_event.is_set():
                logger.debug("Stop requested, skipping remaining repositories")
                break
            counts[repo.url] = self.poll_repository(repo)
        return counts

    def poll_repository(self, repo: Repository) -> int:
        """Update one repository and report its new commits."""
        if repo.is_cloned():
            repo.refresh()
        else:
            repo.ensure_cloned(self.workspace.new_path(), self.history_depth)

        new_commits = repo.poll_new_commits()
        logger.info(f"{len(new_commits)} new commits for: {repo.url}")
        for commit in new_commits:
            self.report(repo, commit)
        return len(new_commits)

    def report(self, repo: Repository, commit: Commit) -> None:
        """Print a commit and, budget permitting, send its notification."""
        commit_url = repo.config.commit_url(commit.hash)
        if self.throttle.should_allow():
            try:
                self.transport.send(repo.url, format_notification_body(commit.subject, commit_url))
            except NotificationError as e:
                logger.warning(f"Notification not delivered: {e}")
        else:
            logger.debug(f"Throttled notification for {commit.hash[:12]}")

        progress(f"{commit.subject}\n{commit_url}\n")
