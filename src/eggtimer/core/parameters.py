"""Parameter model — immutable description of one cooking configuration."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class EggClass(Enum):
    """Egg size class with its default mass in grams."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def default_mass(self) -> float:
        return _DEFAULT_MASS[self]

    @property
    def display_name(self) -> str:
        return _EGG_CLASS_NAMES[self]


class Doneness(Enum):
    """Target yolk firmness, encoded as a core temperature in °C."""

    SOFT = "soft"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def target_temperature(self) -> float:
        return _TARGET_TEMPERATURE[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


class StartTemperatureMode(Enum):
    """Where the egg comes from before it goes into the pot."""

    FROM_FRIDGE = "fridge"
    FROM_ROOM = "room"

    @property
    def default_temperature(self) -> float:
        return _START_TEMPERATURE[self]

    @property
    def minimum_override(self) -> float:
        return _OVERRIDE_FLOOR[self]

    @property
    def display_name(self) -> str:
        label = "Fridge" if self is StartTemperatureMode.FROM_FRIDGE else "Room temperature"
        return f"{label} ({self.default_temperature:g}°C)"


class WaterStartMode(Enum):
    """Whether the egg goes into cold or already boiling water."""

    COLD = "cold"
    BOILING = "boiling"

    @property
    def heatup_seconds(self) -> float:
        """Seconds attributed to bringing about 1 l of water to the boil."""
        return _HEATUP_SECONDS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_DEFAULT_MASS = {EggClass.SMALL: 45.0, EggClass.MEDIUM: 55.0, EggClass.LARGE: 65.0}
_EGG_CLASS_NAMES = {
    EggClass.SMALL: "Small (S)",
    EggClass.MEDIUM: "Medium (M)",
    EggClass.LARGE: "Large (L)",
}
_TARGET_TEMPERATURE = {Doneness.SOFT: 63.0, Doneness.MEDIUM: 65.0, Doneness.HARD: 70.0}
_START_TEMPERATURE = {
    StartTemperatureMode.FROM_FRIDGE: 4.0,
    StartTemperatureMode.FROM_ROOM: 20.0,
}
_OVERRIDE_FLOOR = {
    StartTemperatureMode.FROM_FRIDGE: -10.0,
    StartTemperatureMode.FROM_ROOM: 0.0,
}
_HEATUP_SECONDS = {WaterStartMode.COLD: 360.0, WaterStartMode.BOILING: 0.0}


def resolve_start_temperature(mode: StartTemperatureMode, override: float | None) -> float:
    """Return the starting temperature in °C for *mode*.

    An explicit *override* wins over the mode default but is floored at the
    mode's minimum (−10 °C from the fridge, 0 °C from the room).  No upper
    bound is applied.
    """
    if override is None:
        return mode.default_temperature
    return max(float(override), mode.minimum_override)


@dataclass(frozen=True)
class CookParameters:
    """One cooking configuration.

    ``mass_grams`` defaults to the egg class default.  A caller-supplied mass
    is kept as given, even when out of bounds; see
    :func:`eggtimer.core.validator.validate`.
    """

    egg_class: EggClass = EggClass.MEDIUM
    mass_grams: float | None = None
    start_mode: StartTemperatureMode = StartTemperatureMode.FROM_FRIDGE
    start_temperature_override: float | None = None
    doneness: Doneness = Doneness.MEDIUM
    water_start: WaterStartMode = WaterStartMode.BOILING

    def __post_init__(self) -> None:
        if self.mass_grams is None:
            object.__setattr__(self, "mass_grams", self.egg_class.default_mass)
        else:
            object.__setattr__(self, "mass_grams", float(self.mass_grams))
        if self.start_temperature_override is not None:
            override = float(self.start_temperature_override)
            if not math.isfinite(override):
                raise ValueError(f"start temperature override must be finite, got {override}")
            object.__setattr__(self, "start_temperature_override", override)

    @property
    def start_temperature(self) -> float:
        """Resolved starting temperature in °C."""
        return resolve_start_temperature(self.start_mode, self.start_temperature_override)

    def describe(self) -> str:
        """One-line summary, e.g. ``Medium (M), 55g, Fridge (4°C), Medium, Boiling water``."""
        start = self.start_mode.display_name
        if self.start_temperature_override is not None:
            start = f"{start}, override {self.start_temperature:g}°C"
        return ", ".join(
            (
                self.egg_class.display_name,
                f"{self.mass_grams:g}g",
                start,
                self.doneness.display_name,
                f"{self.water_start.display_name} water",
            )
        )

    # -- single-field updates --------------------------------------------------

    def with_egg_class(self, egg_class: EggClass) -> CookParameters:
        """Switch egg class; the mass follows the new class default."""
        return replace(self, egg_class=egg_class, mass_grams=egg_class.default_mass)

    def with_mass(self, mass_grams: float) -> CookParameters:
        return replace(self, mass_grams=mass_grams)

    def with_start_mode(self, start_mode: StartTemperatureMode) -> CookParameters:
        """Switch start mode; an override given for the old mode is dropped."""
        return replace(self, start_mode=start_mode, start_temperature_override=None)

    def with_start_temperature(self, override: float | None) -> CookParameters:
        return replace(self, start_temperature_override=override)

    def with_doneness(self, doneness: Doneness) -> CookParameters:
        return replace(self, doneness=doneness)

    def with_water_start(self, water_start: WaterStartMode) -> CookParameters:
        return replace(self, water_start=water_start)

    # -- serialisation ---------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of every field."""
        return {
            "egg_class": self.egg_class.value,
            "mass_grams": self.mass_grams,
            "start_mode": self.start_mode.value,
            "start_temperature_override": self.start_temperature_override,
            "doneness": self.doneness.value,
            "water_start": self.water_start.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CookParameters:
        """Rebuild parameters from :meth:`to_dict` output.

        Raises ``ValueError`` for unknown enum values or a malformed mapping.
        """
        try:
            return cls(
                egg_class=EggClass(data["egg_class"]),
                mass_grams=data["mass_grams"],
                start_mode=StartTemperatureMode(data["start_mode"]),
                start_temperature_override=data.get("start_temperature_override"),
                doneness=Doneness(data["doneness"]),
                water_start=WaterStartMode(data["water_start"]),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed cook parameters: {exc!r}") from exc
