"""Git commands used to mirror and read remote branches.

Queries read the remote-tracking branch (origin/<branch>) of a local clone
and return one entry per commit, newest first, exactly as `git log` lists
them.
"""

import subprocess
from pathlib import Path

from common.constants import REMOTE_NAME
from common.logger import get_logger

from .errors import GitCommandError

logger = get_logger(__name__)


def run_git(args: list[str], cwd: Path | None = None) -> str:
    """
    Run a git command and return its stdout.

    The child runs in its own session so a Ctrl-C in the terminal only
    reaches the notifier, which finishes the current operation first.

    Args:
        args: Arguments after "git"
        cwd: Working directory (a local clone), or None

    Returns:
        Decoded stdout; undecodable bytes are replaced

    Raises:
        GitCommandError: If git cannot be started or exits non-zero
    """
    command = ["git", *args]
    logger.debug(f"Running {' '.join(command)}")
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            start_new_session=True,
        )
    except subprocess.CalledProcessError as e:
        raise GitCommandError(command, e.returncode, e.stderr or "") from e
    except OSError as e:
        raise GitCommandError(command, None, str(e)) from e
    return result.stdout


def _log_field(repo_path: Path, branch: str, placeholder: str) -> list[str]:
    # tformat terminates every entry, so an empty subject still yields a line
    output = run_git(
        ["log", f"--pretty=tformat:{placeholder}", f"{REMOTE_NAME}/{branch}", "--"],
        cwd=repo_path,
    )
    return output.split("\n")[:-1]


def list_commit_hashes(repo_path: Path, branch: str) -> list[str]:
    """
    List full commit hashes reachable from origin/<branch>, newest first.

    The list is bounded by the clone's shallow depth.

    Raises:
        GitCommandError: If the branch reference is invalid or git fails
    """
    return _log_field(repo_path, branch, "%H")


def list_commit_subjects(repo_path: Path, branch: str) -> list[str]:
    """
    List commit subject lines for origin/<branch>, in the same order and
    with the same length as list_commit_hashes().

    Raises:
        GitCommandError: If the branch reference is invalid or git fails
    """
    return _log_field(repo_path, branch, "%s")


def clone_repository(url: str, branch: str, destination: Path, depth: int) -> None:
    """
    Make a shallow, commits-only mirror of a single branch.

    Uses: git clone --depth=N --filter=tree:0 --no-checkout --single-branch
    --no-tags --branch <branch> <url> <destination>

    Raises:
        GitCommandError: If the clone fails
    """
    run_git(
        [
            "clone",
            f"--depth={depth}",
            "--filter=tree:0",
            "--no-checkout",
            "--single-branch",
            "--no-tags",
            "--branch",
            branch,
            url,
            str(destination),
        ]
    )


def fetch_repository(repo_path: Path) -> None:
    """
    Fetch new commits into an existing shallow clone without deepening it.

    Uses: git fetch --filter=tree:0 --no-tags --no-deepen --update-shallow
    --no-recurse-submodules

    Raises:
        GitCommandError: If the fetch fails
    """
    run_git(
        [
            "fetch",
            "--filter=tree:0",
            "--no-tags",
            "--no-deepen",
            "--update-shallow",
            "--no-recurse-submodules",
        ],
        cwd=repo_path,
    )
