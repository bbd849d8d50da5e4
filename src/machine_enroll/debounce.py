import logging
import time
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class DebounceState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class DebounceScheduler:
    """Coalesces bursts of text changes into one validation call.

    Nothing runs in the background: the owner calls ``poll()`` from its own
    event loop and the callback fires on the first poll at or after the
    deadline. Every ``touch()`` pushes the deadline out by a full quiet
    window.

    Usage:
        scheduler = DebounceScheduler(0.5, session.run_validation)
        scheduler.touch()     # text changed
        scheduler.poll()      # timer tick; True if validation ran
        scheduler.force()     # field left; runs now if a timer was pending
    """

    def __init__(
        self,
        quiet_window: float,
        callback: Callable[[], None],
        clock: Optional[Callable[[], float]] = None,
    ):
        if quiet_window <= 0:
            raise ValueError("quiet_window must be greater than zero")
        self.quiet_window = quiet_window
        self.callback = callback
        self._clock = clock or time.monotonic
        self.pending = False
        self.deadline: Optional[float] = None

    @property
    def state(self) -> DebounceState:
        return DebounceState.PENDING if self.pending else DebounceState.IDLE

    def touch(self) -> None:
        """Start or restart the quiet timer."""
        self.pending = True
        self.deadline = self._clock() + self.quiet_window

    def cancel(self) -> None:
        self.pending = False
        self.deadline = None

    def poll(self) -> bool:
        """Fire the callback if the quiet window has elapsed."""
        if not self.pending or self._clock() < self.deadline:
            return False
        self.cancel()
        logger.debug("Quiet window elapsed, validating")
        self.callback()
        return True

    def force(self) -> bool:
        """Run the callback now, but only if a timer was pending."""
        if not self.pending:
            return False
        self.cancel()
        logger.debug("Forced validation")
        self.callback()
        return True

    def remaining(self) -> float:
        """Seconds until the pending timer fires, 0 when idle."""
        if not self.pending:
            return 0.0
        return max(0.0, self.deadline - self._clock())
