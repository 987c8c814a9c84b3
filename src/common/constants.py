"""Shared constants for git-notifier.

For environment-based configuration (poll interval, throttle budget, etc.),
use the env module:
    from common.env import env
    depth = env.history_depth()
"""

# Defaults for the global settings; each can be overridden by env or CLI
DEFAULT_HISTORY_DEPTH = 50
DEFAULT_POLL_INTERVAL = 150  # seconds
DEFAULT_THROTTLE_WINDOW = 5  # seconds
DEFAULT_THROTTLE_BUDGET = 5  # notifications per window

# Desktop notification appearance
APP_NAME = "Git notifier"
NOTIFICATION_TIMEOUT_MS = 5000
NOTIFY_SEND_TIMEOUT = 10  # seconds to wait for notify-send to return

# Clones live under <tmp>/<WORKSPACE_DIRNAME>/<n>
WORKSPACE_DIRNAME = "git-notifier"
WORKSPACE_PREFIX = "git-notifier-"

# Remote name git assigns to the cloned url
REMOTE_NAME = "origin"
