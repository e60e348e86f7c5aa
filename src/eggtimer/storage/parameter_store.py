"""Parameter store — named slots of cook parameters in a JSON file."""

from __future__ import annotations

import fcntl
import json
import logging
from pathlib import Path
from typing import Any

from eggtimer.core.parameters import CookParameters

_LOGGER = logging.getLogger(__name__)

_STORE_FILE = "parameters.json"

LAST_SLOT = "last"
FAVORITE_SLOT = "favorite"
SLOTS = frozenset({LAST_SLOT, FAVORITE_SLOT})


class ParameterStore:
    """Persists :class:`CookParameters` under the ``last`` and ``favorite`` slots.

    All slots share ``<config_dir>/parameters.json``; writes hold an
    exclusive ``flock`` and reads a shared one.
    """

    def __init__(self, config_dir: Path) -> None:
        self._path: Path = config_dir / _STORE_FILE

    def save(self, slot: str, params: CookParameters) -> None:
        """Store *params* under *slot*, keeping the other slots."""
        self._check_slot(slot)
        data = self._read()
        data[slot] = params.to_dict()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            fcntl.flock(f, fcntl.LOCK_EX)
            json.dump(data, f, indent=2)
        _LOGGER.debug("Saved parameters to slot %r", slot)

    def load(self, slot: str) -> CookParameters | None:
        """Return the parameters stored under *slot*, or ``None``.

        A slot holding an unreadable entry is treated as empty.
        """
        self._check_slot(slot)
        entry = self._read().get(slot)
        if entry is None:
            return None
        try:
            return CookParameters.from_dict(entry)
        except ValueError:
            _LOGGER.warning("Ignoring unreadable parameters in slot %r", slot, exc_info=True)
            return None

    # -- private helpers -----------------------------------------------------

    @staticmethod
    def _check_slot(slot: str) -> None:
        if slot not in SLOTS:
            raise ValueError(f"unknown slot {slot!r}, expected one of {sorted(SLOTS)}")

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with open(self._path) as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                _LOGGER.warning("Ignoring corrupt parameter file %s", self._path)
                return {}
        return data if isinstance(data, dict) else {}
