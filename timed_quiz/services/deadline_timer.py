"""
services/deadline_timer.py

Whole-second countdown for a session.
Runs as a cancellable asyncio task on the loop that owns the session.
On the tick that reaches zero it only signals the deadline; scoring is the
finalizer's job.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from config import TICK_INTERVAL_SECONDS, WARNING_THRESHOLD_SECONDS
from timed_quiz.models.session_state import SessionState

logger = logging.getLogger(__name__)

DeadlineCallback = Callable[[], Union[Awaitable[None], None]]


def format_remaining(seconds: int) -> str:
    """
    Remaining time as m:ss.

    >>> format_remaining(125)
    '2:05'
    """
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def is_warning(seconds: int, threshold: int = WARNING_THRESHOLD_SECONDS) -> bool:
    """True when the clock should be shown in the warning colour."""
    return seconds < threshold


class DeadlineTimer:
    """
    Counts SessionState.remaining_seconds down to 0.

    Usage:
        timer = DeadlineTimer(state, on_deadline=runner.on_deadline)
        timer.start()   # inside a running event loop
        ...
        timer.cancel()  # abandon / finish
    """

    def __init__(
        self,
        state: SessionState,
        on_deadline: DeadlineCallback,
        interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self._state = state
        self._on_deadline = on_deadline
        self._interval = interval
        self._task: Optional[asyncio.Task] = None
        self._cancelled = False
        self._fired = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def fired(self) -> bool:
        """Whether the deadline signal has been sent."""
        return self._fired

    def tick(self) -> bool:
        """
        Advance the clock by one second.

        Returns:
            True only on the tick that brings remaining_seconds to 0.
            A cancelled timer or a non-active session never ticks.
        """
        if self._cancelled or not self._state.is_active:
            return False
        if self._state.remaining_seconds <= 0:
            return False
        self._state.remaining_seconds -= 1
        return self._state.remaining_seconds == 0

    def start(self) -> None:
        """Schedule the tick loop on the running event loop."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        """Stop future ticks. No deadline signal is sent after this."""
        self._cancelled = True
        if self._task is None or self._task.done():
            return
        # the deadline callback may finish the session from inside the tick task
        if self._task is not asyncio.current_task():
            self._task.cancel()

    async def join(self) -> None:
        """Wait until the tick task ends (deadline handled, finished or cancelled)."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self) -> None:
        while not self._cancelled and self._state.is_active:
            await asyncio.sleep(self._interval)
            if not self.tick():
                continue
            self._fired = True
            logger.info(
                f"Deadline reached for test {self._state.test.id} ({self._state.user_id})"
            )
            outcome = self._on_deadline()
            if inspect.isawaitable(outcome):
                await outcome
            break
