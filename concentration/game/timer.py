"""Countdown timer and the schedulers that drive it."""

import asyncio
import heapq
import itertools
from typing import Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay.

    ``asyncio`` event loops satisfy this protocol as-is.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


def resolve_scheduler(scheduler: Optional[Scheduler]) -> Scheduler:
    """Return ``scheduler``, falling back to the running event loop."""
    if scheduler is not None:
        return scheduler
    return asyncio.get_running_loop()


class ManualHandle:
    """Handle returned by ManualScheduler.call_later."""

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Virtual clock for tests and headless replays.

    Nothing runs until ``advance`` moves the clock past a callback's due time.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running due callbacks in order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled():
                handle.callback()
        self.now = target

    def run_pending(self) -> None:
        """Run callbacks that are already due."""
        self.advance(0)

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for _, _, h in self._queue if not h.cancelled())


class CountdownTimer:
    """Repeating countdown, one decrement per interval."""

    def __init__(
        self,
        duration_seconds: int = 45,
        interval: float = 1.0,
        scheduler: Optional[Scheduler] = None,
    ):
        self.duration_seconds = duration_seconds
        self.interval = interval
        self.remaining = duration_seconds
        self._scheduler = scheduler
        self._handle: Optional[Cancellable] = None
        self._on_tick: Optional[Callable[[int], None]] = None
        self._on_expire: Optional[Callable[[], None]] = None
        self._cancelled = True

    def start(
        self,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
    ) -> None:
        """
        Start the countdown from the current remaining time.

        Args:
            on_tick: Called after every decrement with the remaining seconds
            on_expire: Called once remaining time reaches zero
        """
        if self.is_running:
            return
        self._scheduler = resolve_scheduler(self._scheduler)
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._cancelled = False
        self._schedule_next()

    def cancel(self) -> None:
        """Stop the countdown. Safe to call any number of times."""
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule_next(self) -> None:
        self._handle = self._scheduler.call_later(self.interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        if self._cancelled:
            return

        self.remaining = max(0, self.remaining - 1)
        if self.remaining == 0:
            self._cancelled = True
            self._on_tick(0)
            self._on_expire()
            return

        # Scheduled first so a cancel from inside on_tick sticks
        self._schedule_next()
        self._on_tick(self.remaining)

    def get_remaining(self) -> int:
        """Get remaining seconds."""
        return self.remaining

    @property
    def is_running(self) -> bool:
        """Check if timer is currently running."""
        return not self._cancelled
