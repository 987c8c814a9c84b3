"""Temporary directories for repository clones."""

import tempfile
from pathlib import Path
from types import TracebackType

from common.constants import WORKSPACE_DIRNAME, WORKSPACE_PREFIX
from common.logger import get_logger

logger = get_logger(__name__)


class Workspace:
    """Hands out fresh clone directories inside one temporary directory.

    The whole tree is removed when the workspace is closed.

    Example:
        >>> with Workspace() as workspace:
        ...     path = workspace.new_path()  # <tmp>/git-notifier/0
    """

    def __init__(self, parent: Path | None = None):
        """
        Args:
            parent: Directory to create the temporary directory in, or None
                for the system default
        """
        self._tmp = tempfile.TemporaryDirectory(prefix=WORKSPACE_PREFIX, dir=parent)
        self.root = Path(self._tmp.name)
        self._next_index = 0
        logger.debug(f"Workspace created at {self.root}")

    def new_path(self) -> Path:
        """Return a clone destination that has not been handed out before."""
        path = self.root / WORKSPACE_DIRNAME / str(self._next_index)
        self._next_index += 1
        return path

    def close(self) -> None:
        self._tmp.cleanup()
        logger.debug(f"Workspace {self.root} removed")

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
