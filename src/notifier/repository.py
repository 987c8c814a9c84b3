"""Per-repository clone/fetch lifecycle and new-commit detection."""

from pathlib import Path

from common.logger import get_logger

from .errors import (
    CloneError,
    CommitSourceError,
    EmptyHistoryError,
    FetchError,
    GitCommandError,
    NotClonedError,
)
from .git_utils import clone_repository, fetch_repository, list_commit_hashes, list_commit_subjects
from .models import Commit, CommitBatch, RepoConfig

logger = get_logger(__name__)


def detect_new_commits(
    hashes: list[str],
    subjects: list[str],
    high_water_mark: str | None,
) -> tuple[CommitBatch, bool]:
    """
    Find the commits newer than the high-water mark.

    Walks the newest-first listing until the mark is reached. Without a mark
    (first poll) every listed commit counts as new.

    Args:
        hashes: Commit hashes, newest first
        subjects: Subject lines in the same order
        high_water_mark: Newest hash seen by the previous poll, or None

    Returns:
        Tuple of (new commits oldest first, whether the mark was found).
        When a mark is given but not found, the whole listing is returned.
    """
    new_commits: CommitBatch = []
    for commit_hash, subject in zip(hashes, subjects):
        if commit_hash == high_water_mark:
            new_commits.reverse()
            return new_commits, True
        new_commits.append(Commit(hash=commit_hash, subject=subject))

    new_commits.reverse()
    return new_commits, False


class Repository:
    """A watched repository and its local shallow mirror.

    The poll loop owns each Repository and drives it through
    not-cloned -> cloned -> refreshed on every cycle. Tracking state lives
    in plain attributes:

    - local_path is None until a clone succeeds, then never changes
    - high_water_mark is None until the first successful poll, then always
      holds the branch tip seen by the latest successful poll
    """

    def __init__(self, config: RepoConfig):
        self.config = config
        self.local_path: Path | None = None
        self.high_water_mark: str | None = None

    def __repr__(self) -> str:
        return f"Repository(url={self.url!r}, branch={self.branch!r})"

    @property
    def url(self) -> str:
        return self.config.url

    @property
    def branch(self) -> str:
        return self.config.branch

    def is_cloned(self) -> bool:
        return self.local_path is not None

    def ensure_cloned(self, destination_path: Path, history_depth: int) -> None:
        """
        Clone the tracked branch into destination_path, keeping history_depth commits.

        Callers check is_cloned() first; a repository is cloned at most once.

        Raises:
            CloneError: If already cloned or if git clone fails
        """
        if self.is_cloned():
            raise CloneError(f"{self.url} is already cloned at {self.local_path}")

        destination_path = Path(destination_path)
        logger.info(f"Cloning {self.url} ({self.branch}, depth {history_depth})")
        try:
            destination_path.parent.mkdir(parents=True, exist_ok=True)
            clone_repository(self.url, self.branch, destination_path, history_depth)
        except (GitCommandError, OSError) as e:
            raise CloneError(f"Failed to clone {self.url} into {destination_path}: {e}") from e

        self.local_path = destination_path

    def refresh(self) -> None:
        """
        Fetch the tracked branch into the existing clone.

        Raises:
            NotClonedError: If the repository has not been cloned yet
            FetchError: If git fetch fails
        """
        local_path = self._require_clone("refresh")
        logger.debug(f"Fetching {self.url}")
        try:
            fetch_repository(local_path)
        except GitCommandError as e:
            raise FetchError(f"Failed to fetch {self.url}: {e}") from e

    def poll_new_commits(self) -> CommitBatch:
        """
        Return the commits that appeared since the previous poll, oldest first.

        The first poll returns every commit in the shallow window. Each
        successful poll moves the high-water mark to the current tip, even
        when nothing is new; a failed poll leaves it untouched.

        Raises:
            NotClonedError: If the repository has not been cloned yet
            GitCommandError: If a git query fails
            EmptyHistoryError: If the branch lists no commits
            CommitSourceError: If hashes and subjects differ in count
        """
        local_path = self._require_clone("poll")

        hashes = list_commit_hashes(local_path, self.branch)
        subjects = list_commit_subjects(local_path, self.branch)

        if not hashes:
            raise EmptyHistoryError(f"No commits found on {self.branch} of {self.url}")
        if len(hashes) != len(subjects):
            raise CommitSourceError(
                f"{self.url}: git listed {len(hashes)} hashes but {len(subjects)} subjects"
            )

        candidate_tip = hashes[0]
        new_commits, mark_found = detect_new_commits(hashes, subjects, self.high_water_mark)

        if self.high_water_mark is not None and not mark_found:
            # Commits landed faster than the clone depth keeps; older ones may repeat
            logger.warning(
                f"Last seen commit {self.high_water_mark[:12]} of {self.url} is outside "
                f"the shallow window; reporting all {len(new_commits)} visible commits"
            )

        self.high_water_mark = candidate_tip
        return new_commits

    def _require_clone(self, operation: str) -> Path:
        if self.local_path is None:
            raise NotClonedError(f"Cannot {operation} {self.url}: repository is not cloned")
        return self.local_path
