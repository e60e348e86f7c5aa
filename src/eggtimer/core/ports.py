"""Clock and notifier ports used by the countdown timer.

The timer never reads the system clock or talks to a notification service
directly.  It holds a :class:`Clock` and a :class:`Notifier`, so tests can
drive it with a fake clock and the CLI can drive it with a single-threaded
``sched`` run loop.
"""

from __future__ import annotations

import logging
import sched
import time
from typing import Any, Callable, Protocol

_LOGGER = logging.getLogger(__name__)

COMPLETION_TITLE = "Egg timer"
COMPLETION_MESSAGE = "Your egg is ready! 🥚"


class Clock(Protocol):
    """Wall-clock time plus one-shot callback registration."""

    def now(self) -> float:
        """Return the current time in epoch seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Run *callback* after *delay* seconds and return a cancellable handle."""

    def cancel(self, handle: Any) -> None:
        """Cancel a registration; unknown or already-fired handles are ignored."""


class Notifier(Protocol):
    """Local completion alert service."""

    def schedule_completion(self, after_seconds: float) -> None: ...

    def cancel_all_pending(self) -> None: ...

    def clear_badge_count(self) -> None: ...

    def request_permission(self) -> bool: ...


class SchedulerClock:
    """A :class:`Clock` backed by :class:`sched.scheduler`.

    Callbacks only fire from inside :meth:`run`, on the calling thread, so
    every state transition happens on one control thread.
    """

    def __init__(self) -> None:
        self._scheduler = sched.scheduler(time.time, time.sleep)

    def now(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> sched.Event:
        return self._scheduler.enter(max(delay, 0.0), 0, callback)

    def cancel(self, handle: sched.Event) -> None:
        try:
            self._scheduler.cancel(handle)
        except ValueError:
            # already fired or cancelled
            pass

    def run(self) -> None:
        """Process registered callbacks until none are left."""
        self._scheduler.run()


class ClockNotifier:
    """A :class:`Notifier` that delivers the completion alert through a clock.

    *deliver* receives the alert text when the scheduled instant is reached.
    The badge count is incremented on every delivery.
    """

    def __init__(self, clock: Clock, deliver: Callable[[str], None]) -> None:
        self._clock = clock
        self._deliver = deliver
        self._pending: list[Any] = []
        self.badge_count = 0
        self.permission_granted = False

    def request_permission(self) -> bool:
        self.permission_granted = True
        return True

    def schedule_completion(self, after_seconds: float) -> None:
        _LOGGER.debug("Completion alert scheduled in %.1fs", after_seconds)
        self._pending.append(self._clock.call_later(after_seconds, self._fire))

    def cancel_all_pending(self) -> None:
        for handle in self._pending:
            self._clock.cancel(handle)
        self._pending.clear()

    def clear_badge_count(self) -> None:
        self.badge_count = 0

    def _fire(self) -> None:
        self._pending.clear()
        self.badge_count += 1
        self._deliver(f"{COMPLETION_TITLE}: {COMPLETION_MESSAGE}")
