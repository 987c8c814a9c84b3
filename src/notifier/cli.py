#!/usr/bin/env python3
"""CLI interface for git-notifier.

Example:
    git-notifier --update-interval=150 --throttle-interval=3 \\
        --max-notifications=5 --history-depth=50 \\
        --repos '{"url": "https://github.com/llvm/llvm-project", "commit_subpath": "/commit/", "branch": "main"}' \\
        --repos '{"url": "https://chromium.googlesource.com/chromium/src", "commit_subpath": "/+/", "branch": "main"}'
"""

import argparse
import signal
import threading

from common.env import env
from common.logger import error, get_logger, setup_logging

from .errors import NotifierError
from .main import PollLoop
from .models import RepoConfig
from .repository import Repository
from .throttle import Throttle
from .transport import DesktopTransport, LogTransport
from .workspace import Workspace

logger = get_logger(__name__)


def positive_int(value: str) -> int:
    """argparse type for integers greater than zero."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be greater than zero")
    return number


def non_negative_int(value: str) -> int:
    """argparse type for integers of zero or more."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from e
    if number < 0:
        raise argparse.ArgumentTypeError(f"{value!r} must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from the environment."""
    parser = argparse.ArgumentParser(
        prog="git-notifier",
        description="Watch git repositories and show desktop notifications for new commits",
    )
    parser.add_argument(
        "--repos",
        action="extend",
        nargs="+",
        required=True,
        metavar="JSON",
        help='Repository descriptor, e.g. \'{"url": "...", "commit_subpath": "/commit/", '
        '"branch": "main"}\' (repeatable)',
    )
    parser.add_argument(
        "--history-depth",
        type=positive_int,
        default=env.history_depth(),
        help="Commits kept per shallow clone (default: %(default)s)",
    )
    parser.add_argument(
        "--update-interval",
        type=positive_int,
        default=env.poll_interval(),
        help="Seconds between poll cycles (default: %(default)s)",
    )
    parser.add_argument(
        "--throttle-interval",
        type=non_negative_int,
        default=env.throttle_window(),
        help="Throttle window in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--max-notifications",
        type=non_negative_int,
        default=env.throttle_budget(),
        help="Notifications allowed per throttle window (default: %(default)s)",
    )
    parser.add_argument(
        "--no-desktop",
        action="store_true",
        help="Log notifications instead of showing them on the desktop",
    )
    parser.add_argument(
        "--log-level",
        default=env.log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file",
    )
    return parser


def install_stop_handlers(stop_event: threading.Event) -> None:
    """Make SIGINT/SIGTERM request a stop after the current operation."""

    def request_stop(signum, frame):
        stop_event.set()

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)


def run(args: argparse.Namespace, stop_event: threading.Event | None = None) -> int:
    """Run the notifier with parsed arguments.

    Args:
        args: Parsed command-line arguments
        stop_event: Event that ends the poll loop when set

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        configs = [RepoConfig.from_json(text) for text in args.repos]
    except NotifierError as e:
        error(f"Invalid --repos value: {e}")
        return 1

    repositories = [Repository(config) for config in configs]
    try:
        throttle = Throttle(args.throttle_interval, args.max_notifications)
    except ValueError as e:
        error(f"Invalid throttle settings: {e}")
        return 2
    transport = LogTransport() if args.no_desktop else DesktopTransport()
    stop_event = stop_event or threading.Event()

    try:
        workspace = Workspace(env.workdir())
    except OSError as e:
        error(f"Cannot create a directory for clones: {e}")
        return 1

    logger.info(f"Watching {len(repositories)} repositories every {args.update_interval}s")
    try:
        with workspace:
            loop = PollLoop(
                repositories,
                throttle,
                transport,
                workspace,
                history_depth=args.history_depth,
                poll_interval=args.update_interval,
                stop_event=stop_event,
            )
            loop.run()
    except NotifierError as e:
        logger.debug("Poll loop failed", exc_info=True)
        error(str(e))
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    try:
        parser = build_parser()
    except ValueError as e:
        # Bad NOTIFIER_* environment value
        error(str(e))
        return 2

    args = parser.parse_args(argv)
    try:
        setup_logging(level=args.log_level, log_file=args.log_file)
    except OSError as e:
        error(f"Cannot open log file: {e}")
        return 1

    stop_event = threading.Event()
    install_stop_handlers(stop_event)
    return run(args, stop_event)


if __name__ == "__main__":
    exit(main())
