"""
Debounced scheduling of async work on the running event loop.

Input handlers call ``schedule`` synchronously on every keystroke. A pending
action with the same token is cancelled and its quiet period starts over,
so a burst of keystrokes results in a single dispatch. Once a timer fires
its action runs detached: cancelling the handle afterwards has no effect.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from deskpilot.logger import get_logger

logger = get_logger("debounce")

Action = Callable[[], Awaitable[None]]


@dataclass(eq=False)
class DebounceHandle:
    """A scheduled action that has not necessarily fired yet."""

    token: str
    delay: float
    fired: bool = False
    cancelled: bool = False
    _timer: asyncio.Task | None = field(default=None, repr=False)

    @property
    def pending(self) -> bool:
        return not (self.fired or self.cancelled)


class DebounceScheduler:
    """Token-keyed debounce timers plus tracking of the work they start."""

    def __init__(self) -> None:
        self._pending: dict[str, DebounceHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, delay: float, token: str, action: Action) -> DebounceHandle:
        """
        Run ``action`` after ``delay`` seconds unless rescheduled or cancelled.

        Args:
            delay: Quiet period in seconds
            token: Channel name; scheduling again on a token resets its timer
            action: Coroutine function started when the timer fires

        Returns:
            Handle that can be passed to ``cancel``
        """
        previous = self._pending.get(token)
        if previous is not None:
            self.cancel(previous)

        handle = DebounceHandle(token=token, delay=delay)
        handle._timer = self._track(asyncio.create_task(self._fire_after(handle, action)))
        self._pending[token] = handle
        return handle

    def cancel(self, handle: DebounceHandle) -> bool:
        """Cancel a timer that has not fired yet.

        Returns:
            True if the timer was pending and is now cancelled
        """
        if not handle.pending:
            return False
        handle.cancelled = True
        if handle._timer is not None:
            handle._timer.cancel()
        if self._pending.get(handle.token) is handle:
            del self._pending[handle.token]
        return True

    def cancel_token(self, token: str) -> bool:
        handle = self._pending.get(token)
        return self.cancel(handle) if handle is not None else False

    def pending(self, token: str) -> DebounceHandle | None:
        return self._pending.get(token)

    def spawn(self, action: Action) -> asyncio.Task:
        """Start ``action`` immediately, keeping a reference until it finishes."""
        return self._track(asyncio.create_task(self._run(action)))

    async def settle(self) -> None:
        """Wait until no timer is pending and every started action has finished."""
        while True:
            running = [task for task in self._tasks if not task.done()]
            if not running:
                return
            await asyncio.gather(*running, return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel every pending timer and running action."""
        for handle in list(self._pending.values()):
            self.cancel(handle)
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _fire_after(self, handle: DebounceHandle, action: Action) -> None:
        await asyncio.sleep(handle.delay)
        handle.fired = True
        if self._pending.get(handle.token) is handle:
            del self._pending[handle.token]
        self.spawn(action)

    async def _run(self, action: Action) -> None:
        try:
            await action()
        except Exception:
            logger.exception("Debounced action failed")

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
