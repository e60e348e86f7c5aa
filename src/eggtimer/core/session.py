"""Session Manager — parameters, preview and countdown with JSON persistence."""

from __future__ import annotations

import fcntl
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable

from eggtimer.core.estimator import estimate, format_clock, format_preview
from eggtimer.core.parameters import (
    CookParameters,
    Doneness,
    EggClass,
    StartTemperatureMode,
    WaterStartMode,
)
from eggtimer.core.ports import Clock, ClockNotifier, Notifier, SchedulerClock
from eggtimer.core.timer import CountdownTimer, InvalidStateError, TimerPhase, TimerSnapshot
from eggtimer.core.validator import validate
from eggtimer.storage.parameter_store import FAVORITE_SLOT, LAST_SLOT, ParameterStore

_LOGGER = logging.getLogger(__name__)

CONFIG_DIR_ENV = "EGGTIMER_CONFIG_DIR"
_DEFAULT_CONFIG_DIR = Path.home() / ".config" / "eggtimer"
_STATE_FILE = "session.json"


def default_config_dir() -> Path:
    """Return ``$EGGTIMER_CONFIG_DIR`` if set, else ``~/.config/eggtimer``."""
    override = os.environ.get(CONFIG_DIR_ENV)
    return Path(override) if override else _DEFAULT_CONFIG_DIR


class Session:
    """Owns the current parameters, their live preview and the countdown.

    Parameters and the timer state are written to
    ``<config_dir>/session.json`` after every mutation so a countdown
    survives across process invocations.  On load a running countdown is
    re-armed from its stored deadline.  Each tick re-reads the file so
    that a pause, reset or restart made by another process is adopted.
    """

    def __init__(
        self,
        config_dir: Path | None = None,
        clock: Clock | None = None,
        notifier: Notifier | None = None,
        store: ParameterStore | None = None,
        on_tick: Callable[[TimerSnapshot], None] | None = None,
        on_complete: Callable[[TimerSnapshot], None] | None = None,
    ) -> None:
        self._config_dir: Path = config_dir if config_dir is not None else default_config_dir()
        self.clock: Clock = clock if clock is not None else SchedulerClock()
        self._notifier: Notifier = (
            notifier if notifier is not None else ClockNotifier(self.clock, _LOGGER.info)
        )
        self._store = store if store is not None else ParameterStore(self._config_dir)
        self._on_tick = on_tick
        self._on_complete = on_complete
        self._last_state: str | None = None

        self._parameters: CookParameters = CookParameters()
        self._preview_seconds: float = 0.0
        self._validation_messages: list[str] = []
        self._timer = CountdownTimer(
            self.clock,
            self._notifier,
            on_tick=self._handle_tick,
            on_complete=self._handle_complete,
        )
        self._load()

    # -- parameters ----------------------------------------------------------

    @property
    def parameters(self) -> CookParameters:
        return self._parameters

    @property
    def preview_seconds(self) -> float:
        """Estimated duration for the current parameters, 0 when invalid."""
        return self._preview_seconds

    @property
    def validation_messages(self) -> list[str]:
        return list(self._validation_messages)

    @property
    def timer(self) -> CountdownTimer:
        return self._timer

    def update_egg_class(self, egg_class: EggClass) -> float:
        return self.set_parameters(self._parameters.with_egg_class(egg_class))

    def update_mass(self, mass_grams: float) -> float:
        return self.set_parameters(self._parameters.with_mass(mass_grams))

    def update_start_mode(self, start_mode: StartTemperatureMode) -> float:
        return self.set_parameters(self._parameters.with_start_mode(start_mode))

    def update_start_temperature(self, override: float | None) -> float:
        return self.set_parameters(self._parameters.with_start_temperature(override))

    def update_doneness(self, doneness: Doneness) -> float:
        return self.set_parameters(self._parameters.with_doneness(doneness))

    def update_water_start(self, water_start: WaterStartMode) -> float:
        return self.set_parameters(self._parameters.with_water_start(water_start))

    def set_parameters(self, params: CookParameters) -> float:
        """Replace the parameters, clear messages and return the new preview."""
        self._parameters = params
        self._validation_messages = []
        preview = self.on_parameters_changed()
        self._save()
        return preview

    def on_parameters_changed(self) -> float:
        """Recompute the preview duration for the current parameters."""
        if validate(self._parameters).is_valid:
            self._preview_seconds = estimate(self._parameters)
        else:
            self._preview_seconds = 0.0
        return self._preview_seconds

    def preview(self) -> tuple[str, int]:
        """Return ``(message, exit_code)`` describing the current estimate."""
        result = validate(self._parameters)
        if not result.is_valid:
            return "\n".join(result.messages), 1
        return f"Estimated cooking time: {format_preview(self._preview_seconds)}", 0

    # -- favourites ----------------------------------------------------------

    def save_favorite(self) -> str:
        self._store.save(FAVORITE_SLOT, self._parameters)
        return "Saved current parameters as favorite"

    def load_favorite(self) -> CookParameters | None:
        """Adopt the favourite parameters; ``None`` when none were saved."""
        return self._adopt(self._store.load(FAVORITE_SLOT))

    def load_last(self) -> CookParameters | None:
        """Adopt the parameters of the last started timer, if any."""
        return self._adopt(self._store.load(LAST_SLOT))

    # -- countdown -----------------------------------------------------------

    def calculate_and_start(self) -> tuple[str, int]:
        """Validate, commit the estimate and start the countdown.

        Returns ``(message, exit_code)``; invalid parameters produce their
        validation messages and exit code 1 without touching the timer.
        Raises :class:`InvalidStateError` if a countdown is already running.
        """
        result = validate(self._parameters)
        if not result.is_valid:
            self._validation_messages = list(result.messages)
            self._save()
            return "\n".join(result.messages), 1

        duration = estimate(self._parameters)
        self._request_permission()
        self._timer.start(duration)
        self._store.save(LAST_SLOT, self._parameters)
        self._save()
        return f"Timer started: {format_clock(duration)}", 0

    def status(self) -> tuple[str, int]:
        """Return ``(message, exit_code)``."""
        remaining = self._timer.get_remaining()
        phase = self._timer.get_phase()
        if phase == TimerPhase.RUNNING:
            return f"{format_clock(remaining)} remaining", 0
        if phase == TimerPhase.PAUSED:
            return f"{format_clock(remaining)} remaining (paused)", 0
        if phase == TimerPhase.COMPLETED:
            return "Your egg is ready", 1
        return "No active timer", 1

    def pause(self) -> str:
        """Pause the running countdown."""
        self._timer.pause()
        self._save()
        return f"Timer paused at {format_clock(self._timer.get_remaining())} remaining"

    def resume(self) -> str:
        """Resume a paused countdown."""
        phase = self._timer.get_phase()
        if phase != TimerPhase.PAUSED:
            raise InvalidStateError(f"resume() is not valid from {phase.value} state")
        self._timer.start()
        self._save()
        return f"Timer resumed: {format_clock(self._timer.get_remaining())} remaining"

    def reset(self) -> str:
        """Return to idle with the committed duration."""
        self._timer.reset()
        self._save()
        return f"Timer reset to {format_clock(self._timer.get_remaining())}"

    def stop(self) -> str:
        """Reset, clear the alert badge and leave the countdown."""
        self._timer.stop()
        self._save()
        return "Timer stopped"

    def foreground(self) -> tuple[str, int]:
        """Re-arm after the process was suspended and report the status."""
        self._timer.refresh()
        self._save()
        return self.status()

    # -- private helpers -----------------------------------------------------

    def _adopt(self, params: CookParameters | None) -> CookParameters | None:
        if params is not None:
            self.set_parameters(params)
        return params

    def _request_permission(self) -> None:
        try:
            if not self._notifier.request_permission():
                _LOGGER.warning("Notification permission denied; countdown continues without alert")
        except Exception:  # pylint: disable=broad-except
            _LOGGER.warning("Requesting notification permission failed", exc_info=True)

    def _handle_tick(self, snapshot: TimerSnapshot) -> None:
        if self.sync():
            return
        if self._on_tick is not None:
            self._on_tick(snapshot)

    def _handle_complete(self, snapshot: TimerSnapshot) -> None:
        if self.sync():
            _LOGGER.info("Countdown changed by another process before completing here")
            return
        self._save()
        if self._on_complete is not None:
            self._on_complete(snapshot)

    # -- persistence ---------------------------------------------------------

    def sync(self) -> bool:
        """Adopt state another process wrote since this session last read or wrote it.

        Returns True when the stored state differed and was adopted; a
        countdown paused or reset elsewhere stops ticking and its alert
        is cancelled here too.
        """
        text = self._read_state()
        if text is None or text == self._last_state:
            return False
        try:
            params, snapshot = _decode_state(text)
        except (ValueError, TypeError):
            _LOGGER.warning(
                "Ignoring unreadable session file %s", self._state_path, exc_info=True
            )
            return False
        _LOGGER.debug("Adopting session state written by another process")
        self._last_state = text
        self._adopt_state(params, snapshot)
        return True

    @property
    def _state_path(self) -> Path:
        return self._config_dir / _STATE_FILE

    def _save(self) -> None:
        """Write parameters and timer state to the JSON file with file locking."""
        self._config_dir.mkdir(parents=True, exist_ok=True)
        snapshot = self._timer.snapshot()
        data: dict[str, Any] = {
            "parameters": self._parameters.to_dict(),
            "timer": {
                "phase": snapshot.phase.value,
                "committed_duration": snapshot.committed_duration,
                "remaining": snapshot.remaining,
                "deadline": snapshot.deadline,
            },
        }
        text = json.dumps(data)
        with open(self._state_path, "w") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            f.write(text)
        self._last_state = text

    def _read_state(self) -> str | None:
        if not self._state_path.exists():
            return None
        with open(self._state_path) as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            return f.read()

    def _load(self) -> None:
        """Load state from the JSON file, falling back to the last parameters."""
        text = self._read_state()
        if text is not None:
            try:
                params, snapshot = _decode_state(text)
            except (ValueError, TypeError):
                _LOGGER.warning(
                    "Ignoring unreadable session file %s", self._state_path, exc_info=True
                )
            else:
                self._last_state = text
                self._adopt_state(params, snapshot)
                return

        last = self._store.load(LAST_SLOT)
        if last is not None:
            self._parameters = last
        self.on_parameters_changed()

    def _adopt_state(
        self, params: CookParameters | None, snapshot: TimerSnapshot | None
    ) -> None:
        if params is not None:
            self._parameters = params
        self.on_parameters_changed()
        if snapshot is not None:
            self._timer.restore(snapshot)


def _decode_state(text: str) -> tuple[CookParameters | None, TimerSnapshot | None]:
    """Parse session.json contents; raises ``ValueError`` or ``TypeError`` when malformed."""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("session state must be a JSON object")

    params = CookParameters.from_dict(data["parameters"]) if "parameters" in data else None

    raw_timer = data.get("timer")
    if raw_timer is None:
        return params, None
    if not isinstance(raw_timer, dict):
        raise ValueError("timer state must be a JSON object")
    deadline = raw_timer.get("deadline")
    snapshot = TimerSnapshot(
        phase=TimerPhase(raw_timer.get("phase", "idle")),
        committed_duration=float(raw_timer.get("committed_duration", 0.0)),
        remaining=float(raw_timer.get("remaining", 0.0)),
        deadline=float(deadline) if deadline is not None else None,
    )
    if snapshot.phase == TimerPhase.RUNNING and snapshot.deadline is None:
        raise ValueError("a running countdown needs a deadline")
    return params, snapshot
