"""Fixtures that build throwaway upstream git repositories."""

import subprocess
from pathlib import Path

import pytest


def git(repo_path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=repo_path,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


class Upstream:
    """A local repository standing in for a remote."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def url(self) -> str:
        # file:// so that --depth is honoured for local clones
        return self.path.as_uri()

    def commit(self, message: str) -> str:
        """Create an empty commit and return its hash."""
        git(self.path, "commit", "--allow-empty", "--allow-empty-message", "-m", message)
        return git(self.path, "rev-parse", "HEAD")

    def commits(self, *messages: str) -> list[str]:
        return [self.commit(message) for message in messages]


@pytest.fixture
def upstream(tmp_path):
    """
    Create an upstream repository on branch "main" with git identity set.
    """
    repo_path = tmp_path / "upstream"
    repo_path.mkdir()

    git(repo_path, "init")
    git(repo_path, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo_path, "config", "user.name", "Test User")
    git(repo_path, "config", "user.email", "test@example.com")
    git(repo_path, "config", "commit.gpgsign", "false")

    return Upstream(repo_path)
