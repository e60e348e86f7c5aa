"""Timer core — a deadline-anchored countdown state machine."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from eggtimer.core.ports import Clock, Notifier

_LOGGER = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class TimerPhase(Enum):
    """Possible phases of the countdown."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class InvalidStateError(Exception):
    """Raised when an invalid state transition is attempted."""


_VALID_START_PHASES = frozenset({TimerPhase.IDLE, TimerPhase.PAUSED, TimerPhase.COMPLETED})


@dataclass(frozen=True)
class TimerSnapshot:
    """Observable timer state; ``deadline`` is set only while running."""

    phase: TimerPhase
    committed_duration: float
    remaining: float
    deadline: Optional[float] = None


class CountdownTimer:
    """A single countdown anchored to an absolute deadline.

    While running, the remaining time is always ``max(0, deadline - now)``,
    recomputed on every observation and never decremented per tick, so late,
    skipped or coalesced ticks cannot make it drift.  All transitions are
    expected on one control thread; the clock delivers tick callbacks there.
    """

    def __init__(
        self,
        clock: Clock,
        notifier: Notifier,
        on_tick: Optional[Callable[[TimerSnapshot], None]] = None,
        on_complete: Optional[Callable[[TimerSnapshot], None]] = None,
    ) -> None:
        self._clock = clock
        self._notifier = notifier
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._phase: TimerPhase = TimerPhase.IDLE
        self._committed_duration: float = 0.0
        self._remaining: float = 0.0
        self._deadline: Optional[float] = None
        self._tick_handle: Any = None
        self._tick_generation: int = 0

    # -- public interface ----------------------------------------------------

    def start(self, duration_seconds: Optional[float] = None) -> None:
        """Start or resume the countdown.

        With *duration_seconds* the committed duration is replaced.  Without
        it a paused timer resumes from its frozen remaining time and an idle
        or completed timer runs the committed duration again.

        Valid only from IDLE, PAUSED or COMPLETED.
        """
        if duration_seconds is not None:
            duration = float(duration_seconds)
            if not math.isfinite(duration) or duration < 0:
                raise ValueError(f"duration_seconds must be a finite value >= 0, got {duration}")
        self._require_state("start", _VALID_START_PHASES)

        if duration_seconds is not None:
            self._committed_duration = duration
            self._remaining = duration
        elif self._phase != TimerPhase.PAUSED:
            self._remaining = self._committed_duration
        self._begin_running()

    def pause(self) -> None:
        """Freeze the remaining time.

        Valid only from RUNNING.
        """
        # Observe first so a timer whose deadline already passed reports
        # completed instead of pausing at zero.
        self.get_remaining()
        self._require_state("pause", frozenset({TimerPhase.RUNNING}))

        self._remaining = self._remaining_until_deadline()
        self._deadline = None
        self._phase = TimerPhase.PAUSED
        self._cancel_tick()
        self._cancel_notifications()

    def reset(self) -> None:
        """Return to IDLE with the committed duration as remaining time."""
        self._cancel_tick()
        self._cancel_notifications()
        self._deadline = None
        self._remaining = self._committed_duration
        self._phase = TimerPhase.IDLE

    def stop(self) -> None:
        """Reset and clear any delivered alert badge."""
        self.reset()
        try:
            self._notifier.clear_badge_count()
        except Exception:  # pylint: disable=broad-except
            _LOGGER.warning("Clearing the badge count failed", exc_info=True)

    def tick(self) -> float:
        """Recompute the remaining time from the deadline and return it."""
        return self.get_remaining()

    def refresh(self) -> None:
        """Re-arm after the process was suspended or came to the foreground.

        Recomputes the remaining time from the stored deadline.  If the
        countdown is still running, the completion alert is cancelled and
        scheduled again for the (possibly shorter) remaining time.
        """
        if self._phase != TimerPhase.RUNNING:
            return
        remaining = self.get_remaining()
        if self._phase != TimerPhase.RUNNING:
            return
        _LOGGER.debug("Re-arming countdown with %.1fs remaining", remaining)
        self._cancel_notifications()
        self._schedule_notification(remaining)
        self._cancel_tick()
        self._schedule_tick()

    def get_remaining(self) -> float:
        """Return the remaining time in seconds.

        Automatically transitions to COMPLETED when a running countdown
        reaches 0.
        """
        if self._phase == TimerPhase.RUNNING:
            self._remaining = self._remaining_until_deadline()
            if self._remaining <= 0.0:
                self._complete()
        return self._remaining

    def get_phase(self) -> TimerPhase:
        """Return the current phase."""
        return self._phase

    def get_committed_duration(self) -> float:
        """Return the committed duration in seconds."""
        return self._committed_duration

    def get_deadline(self) -> Optional[float]:
        """Return the absolute deadline, or ``None`` when not running."""
        return self._deadline

    def get_progress(self) -> float:
        """Return the elapsed fraction of the committed duration (0.0--1.0)."""
        if self._committed_duration <= 0:
            return 0.0
        return 1.0 - self.get_remaining() / self._committed_duration

    def snapshot(self) -> TimerSnapshot:
        """Return the current state with the remaining time freshly computed."""
        remaining = self.get_remaining()
        return TimerSnapshot(
            phase=self._phase,
            committed_duration=self._committed_duration,
            remaining=remaining,
            deadline=self._deadline,
        )

    def restore(self, snapshot: TimerSnapshot) -> None:
        """Adopt a previously captured state.

        A running countdown is re-armed from its deadline; any other phase
        drops the pending tick and completion alert.
        """
        if snapshot.phase == TimerPhase.RUNNING and snapshot.deadline is None:
            raise ValueError("a running snapshot needs a deadline")
        self._cancel_tick()
        self._phase = snapshot.phase
        self._committed_duration = snapshot.committed_duration
        self._remaining = max(snapshot.remaining, 0.0)
        self._deadline = snapshot.deadline if snapshot.phase == TimerPhase.RUNNING else None
        if self._phase != TimerPhase.RUNNING:
            self._cancel_notifications()
        self.refresh()

    # -- private helpers -----------------------------------------------------

    def _require_state(self, method: str, valid: frozenset[TimerPhase]) -> None:
        """Raise ``InvalidStateError`` if the current phase is not in *valid*."""
        if self._phase not in valid:
            raise InvalidStateError(f"{method}() is not valid from {self._phase.value} state")

    def _remaining_until_deadline(self) -> float:
        if self._deadline is None:
            return self._remaining
        return max(self._deadline - self._clock.now(), 0.0)

    def _begin_running(self) -> None:
        """Anchor the deadline, schedule the alert and the tick, enter RUNNING."""
        self._deadline = self._clock.now() + self._remaining
        self._phase = TimerPhase.RUNNING
        if self._remaining <= 0.0:
            self._complete()
            return
        self._cancel_notifications()
        self._schedule_notification(self._remaining)
        self._cancel_tick()
        self._schedule_tick()

    def _complete(self) -> None:
        self._cancel_tick()
        self._remaining = 0.0
        self._deadline = None
        self._phase = TimerPhase.COMPLETED
        _LOGGER.info("Countdown of %.0fs completed", self._committed_duration)
        if self._on_complete is not None:
            self._on_complete(
                TimerSnapshot(TimerPhase.COMPLETED, self._committed_duration, 0.0)
            )

    # -- tick registration ---------------------------------------------------

    def _schedule_tick(self) -> None:
        self._tick_generation += 1
        generation = self._tick_generation
        self._tick_handle = self._clock.call_later(
            TICK_INTERVAL, lambda: self._handle_tick(generation)
        )

    def _cancel_tick(self) -> None:
        # Bumping the generation turns any callback already in flight into a no-op.
        self._tick_generation += 1
        if self._tick_handle is not None:
            self._clock.cancel(self._tick_handle)
            self._tick_handle = None

    def _handle_tick(self, generation: int) -> None:
        if generation != self._tick_generation or self._phase != TimerPhase.RUNNING:
            _LOGGER.debug("Ignoring stale tick callback")
            return
        self._tick_handle = None
        remaining = self.tick()
        if self._phase != TimerPhase.RUNNING:
            return
        if self._on_tick is not None:
            self._on_tick(
                TimerSnapshot(
                    TimerPhase.RUNNING, self._committed_duration, remaining, self._deadline
                )
            )
        # the callback may have paused or re-armed the countdown
        if self._phase == TimerPhase.RUNNING and self._tick_handle is None:
            self._schedule_tick()

    # -- notifier --------------------------------------------------------------

    def _schedule_notification(self, after_seconds: float) -> None:
        try:
            self._notifier.schedule_completion(after_seconds)
        except Exception:  # pylint: disable=broad-except
            _LOGGER.warning("Scheduling the completion alert failed", exc_info=True)

    def _cancel_notifications(self) -> None:
        try:
            self._notifier.cancel_all_pending()
        except Exception:  # pylint: disable=broad-except
            _LOGGER.warning("Cancelling pending alerts failed", exc_info=True)
