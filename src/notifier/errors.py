"""Exceptions raised while tracking repositories and delivering notifications."""


class NotifierError(Exception):
    """Base exception for git-notifier errors."""

    pass


class GitCommandError(NotifierError):
    """A git query could not be run or exited non-zero."""

    def __init__(self, command: list[str], returncode: int | None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        status = "could not start" if returncode is None else f"exited with {returncode}"
        super().__init__(f"`{' '.join(command)}` {status}{detail}")


class CommitSourceError(NotifierError):
    """Hash and subject listings for a branch disagree."""

    pass


class CloneError(NotifierError):
    """Cloning a repository failed."""

    pass


class FetchError(NotifierError):
    """Refreshing an existing clone failed."""

    pass


class NotClonedError(NotifierError):
    """An operation needed a local clone that does not exist yet."""

    pass


class EmptyHistoryError(NotifierError):
    """A cloned branch listed no commits at all."""

    pass


class MalformedConfigError(NotifierError):
    """A repository descriptor could not be parsed."""

    pass


class NotificationError(NotifierError):
    """A notification could not be delivered."""

    pass
