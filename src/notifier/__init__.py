"""Watch git repositories and notify about new commits.

Example:
    >>> from pathlib import Path
    >>> from notifier import RepoConfig, Repository
    >>>
    >>> repo = Repository(RepoConfig("https://github.com/git/git", "/commit/", "master"))
    >>> repo.ensure_cloned(Path("/tmp/git"), history_depth=50)
    >>> for commit in repo.poll_new_commits():
    ...     print(commit.subject)
"""

from .errors import (
    CloneError,
    CommitSourceError,
    EmptyHistoryError,
    FetchError,
    GitCommandError,
    MalformedConfigError,
    NotClonedError,
    NotificationError,
    NotifierError,
)
from .main import PollLoop
from .models import Commit, CommitBatch, RepoConfig
from .repository import Repository, detect_new_commits
from .throttle import Throttle
from .transport import DesktopTransport, LogTransport, Transport

__all__ = [
    # Tracking
    "Repository",
    "detect_new_commits",
    "PollLoop",
    "Throttle",
    # Models
    "Commit",
    "CommitBatch",
    "RepoConfig",
    # Transports
    "Transport",
    "DesktopTransport",
    "LogTransport",
    # Exceptions
    "NotifierError",
    "GitCommandError",
    "CommitSourceError",
    "CloneError",
    "FetchError",
    "NotClonedError",
    "EmptyHistoryError",
    "MalformedConfigError",
    "NotificationError",
]
