"""Data models for repository tracking."""

import json
from dataclasses import dataclass
from typing import Any

from .errors import MalformedConfigError

REQUIRED_FIELDS = ("url", "commit_subpath", "branch")


@dataclass(frozen=True)
class Commit:
    """A commit as listed by git: full hash and subject line."""

    hash: str
    subject: str


# Commits found by one poll, oldest first
CommitBatch = list[Commit]


@dataclass(frozen=True)
class RepoConfig:
    """A configured repository to watch.

    Attributes:
        url: Clone url, also used as the notification title and link base
        commit_subpath: Path segment between url and hash in a commit link,
            e.g. "/commit/" for GitHub or "/+/" for Gitiles
        branch: Branch to track
    """

    url: str
    commit_subpath: str
    branch: str

    def commit_url(self, commit_hash: str) -> str:
        """Build the web permalink for a commit."""
        return f"{self.url}{self.commit_subpath}{commit_hash}"

    @classmethod
    def from_dict(cls, data: Any) -> "RepoConfig":
        """Build a RepoConfig from a decoded descriptor.

        Raises:
            MalformedConfigError: If a field is missing or not a string
        """
        if not isinstance(data, dict):
            raise MalformedConfigError(
                f"Repository descriptor must be a JSON object, got {type(data).__name__}"
            )

        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise MalformedConfigError(
                f"Repository descriptor is missing {', '.join(missing)}: {data!r}"
            )

        for name in REQUIRED_FIELDS:
            if not isinstance(data[name], str):
                raise MalformedConfigError(f"Repository field '{name}' must be a string: {data!r}")

        if not data["url"] or not data["branch"]:
            raise MalformedConfigError(f"Repository url and branch must not be empty: {data!r}")

        return cls(url=data["url"], commit_subpath=data["commit_subpath"], branch=data["branch"])

    @classmethod
    def from_json(cls, text: str) -> "RepoConfig":
        """Parse a JSON descriptor such as
        '{"url": "https://github.com/git/git", "commit_subpath": "/commit/", "branch": "master"}'.

        Raises:
            MalformedConfigError: If the text is not valid JSON or lacks a field
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedConfigError(f"Invalid repository JSON {text!r}: {e}") from e
        return cls.from_dict(data)
