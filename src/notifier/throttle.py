"""Rate limiting for outbound notifications."""

import time
from collections.abc import Callable
from datetime import timedelta


class Throttle:
    """Fixed-window counter that caps notifications per window.

    Unlike a blocking rate limiter, the throttle never sleeps: each call to
    should_allow() answers immediately, and a denied notification is simply
    not sent. Windows reset lazily on the first call after the window has
    elapsed; that call is allowed without spending budget.

    Example:
        >>> throttle = Throttle(window_length=5, budget_capacity=2)
        >>> throttle.should_allow(), throttle.should_allow(), throttle.should_allow()
        (True, True, False)
    """

    def __init__(
        self,
        window_length: float | timedelta,
        budget_capacity: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the throttle with a full budget.

        Args:
            window_length: Window duration in seconds (or a timedelta)
            budget_capacity: Notifications allowed per window
            clock: Monotonic time source in seconds, replaceable in tests
        """
        if isinstance(window_length, timedelta):
            window_length = window_length.total_seconds()
        if window_length < 0:
            raise ValueError(f"window_length must not be negative, got {window_length}")
        if budget_capacity < 0:
            raise ValueError(f"budget_capacity must not be negative, got {budget_capacity}")

        self.window_length = float(window_length)
        self.budget_capacity = budget_capacity
        self.budget_remaining = budget_capacity
        self._clock = clock
        self.window_start = clock()

    def should_allow(self) -> bool:
        """Decide whether one more notification may be sent now.

        Not thread-safe; call it from the poll thread only.
        """
        now = self._clock()
        if now - self.window_start > self.window_length:
            self.budget_remaining = self.budget_capacity
            self.window_start = now
            return True

        if self.budget_remaining > 0:
            self.budget_remaining -= 1
            return True

        return False
