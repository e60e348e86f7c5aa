"""Shared fakes for the clock and notifier ports."""

from __future__ import annotations

from typing import Callable

import pytest


class FakeClock:
    """A manually advanced clock.

    ``advance`` fires due callbacks in deadline order; ``suspend`` moves time
    forward without delivering anything, like a process that was frozen.
    """

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start
        self._pending: dict[int, tuple[float, Callable[[], None]]] = {}
        self._next_handle = 0

    def now(self) -> float:
        return self.current

    def call_later(self, delay: float, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = (self.current + delay, callback)
        return self._next_handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def advance(self, seconds: float) -> None:
        target = self.current + seconds
        while True:
            due = [(when, handle) for handle, (when, _) in self._pending.items() if when <= target]
            if not due:
                break
            when, handle = min(due)
            _, callback = self._pending.pop(handle)
            self.current = when
            callback()
        self.current = target

    def suspend(self, seconds: float) -> None:
        self.current += seconds


class FakeNotifier:
    """Records every call made through the notifier port."""

    def __init__(self, fail: bool = False, grant: bool = True) -> None:
        self.fail = fail
        self.grant = grant
        self.scheduled: list[float] = []
        self.cancel_calls = 0
        self.badge_clears = 0
        self.permission_requests = 0

    def schedule_completion(self, after_seconds: float) -> None:
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.scheduled.append(after_seconds)

    def cancel_all_pending(self) -> None:
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.cancel_calls += 1

    def clear_badge_count(self) -> None:
        if self.fail:
            raise RuntimeError("notification service unavailable")
        self.badge_clears += 1

    def request_permission(self) -> bool:
        self.permission_requests += 1
        if self.fail:
            raise RuntimeError("notification service unavailable")
        return self.grant


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()
