"""Tests for the immutable parameter model."""

import json

import pytest

from eggtimer.core.parameters import (
    CookParameters,
    Doneness,
    EggClass,
    StartTemperatureMode,
    WaterStartMode,
    resolve_start_temperature,
)


class TestEnumerations:
    """Fixed per-member constants."""

    def test_default_masses(self) -> None:
        assert [c.default_mass for c in EggClass] == [45.0, 55.0, 65.0]

    def test_target_temperatures(self) -> None:
        assert [d.target_temperature for d in Doneness] == [63.0, 65.0, 70.0]

    def test_start_temperatures(self) -> None:
        assert StartTemperatureMode.FROM_FRIDGE.default_temperature == 4.0
        assert StartTemperatureMode.FROM_ROOM.default_temperature == 20.0

    def test_heatup_seconds(self) -> None:
        assert WaterStartMode.COLD.heatup_seconds == 360.0
        assert WaterStartMode.BOILING.heatup_seconds == 0.0

    def test_display_names(self) -> None:
        assert EggClass.MEDIUM.display_name == "Medium (M)"
        assert StartTemperatureMode.FROM_FRIDGE.display_name == "Fridge (4°C)"
        assert Doneness.HARD.display_name == "Hard"


class TestResolveStartTemperature:
    """Overrides win over mode defaults, floored per mode."""

    def test_no_override_uses_default(self) -> None:
        assert resolve_start_temperature(StartTemperatureMode.FROM_ROOM, None) == 20.0

    def test_override_wins(self) -> None:
        assert resolve_start_temperature(StartTemperatureMode.FROM_ROOM, 23.5) == 23.5

    def test_override_beyond_slider_range_is_accepted(self) -> None:
        assert resolve_start_temperature(StartTemperatureMode.FROM_ROOM, 55.0) == 55.0
        assert resolve_start_temperature(StartTemperatureMode.FROM_FRIDGE, -8.0) == -8.0

    def test_fridge_override_floor(self) -> None:
        assert resolve_start_temperature(StartTemperatureMode.FROM_FRIDGE, -40.0) == -10.0

    def test_room_override_floor(self) -> None:
        assert resolve_start_temperature(StartTemperatureMode.FROM_ROOM, -3.0) == 0.0


class TestCookParameters:
    """Construction and single-field updates."""

    def test_defaults(self) -> None:
        params = CookParameters()
        assert params.egg_class == EggClass.MEDIUM
        assert params.mass_grams == 55.0
        assert params.start_mode == StartTemperatureMode.FROM_FRIDGE
        assert params.start_temperature == 4.0
        assert params.doneness == Doneness.MEDIUM
        assert params.water_start == WaterStartMode.BOILING

    def test_mass_follows_egg_class_default(self) -> None:
        assert CookParameters(egg_class=EggClass.LARGE).mass_grams == 65.0

    def test_explicit_mass_out_of_bounds_is_kept(self) -> None:
        assert CookParameters(mass_grams=20).mass_grams == 20.0

    def test_is_immutable(self) -> None:
        params = CookParameters()
        with pytest.raises(AttributeError):
            params.mass_grams = 60.0  # type: ignore[misc]

    def test_structural_equality(self) -> None:
        assert CookParameters() == CookParameters(mass_grams=55)

    def test_with_egg_class_resets_mass(self) -> None:
        params = CookParameters(mass_grams=70).with_egg_class(EggClass.SMALL)
        assert params.egg_class == EggClass.SMALL
        assert params.mass_grams == 45.0

    def test_with_mass_returns_new_instance(self) -> None:
        original = CookParameters()
        updated = original.with_mass(60)
        assert original.mass_grams == 55.0
        assert updated.mass_grams == 60.0

    def test_with_start_mode_drops_override(self) -> None:
        params = CookParameters().with_start_temperature(-2.0)
        switched = params.with_start_mode(StartTemperatureMode.FROM_ROOM)
        assert switched.start_temperature_override is None
        assert switched.start_temperature == 20.0

    def test_with_doneness_and_water_start(self) -> None:
        params = CookParameters().with_doneness(Doneness.SOFT).with_water_start(WaterStartMode.COLD)
        assert params.doneness == Doneness.SOFT
        assert params.water_start == WaterStartMode.COLD

    def test_non_finite_override_raises(self) -> None:
        with pytest.raises(ValueError):
            CookParameters(start_temperature_override=float("inf"))

    def test_describe_defaults(self) -> None:
        expected = "Medium (M), 55g, Fridge (4°C), Medium, Boiling water"
        assert CookParameters().describe() == expected

    def test_describe_with_override(self) -> None:
        params = CookParameters(
            egg_class=EggClass.LARGE,
            start_mode=StartTemperatureMode.FROM_ROOM,
            start_temperature_override=23.5,
            doneness=Doneness.HARD,
            water_start=WaterStartMode.COLD,
        )
        assert params.describe() == (
            "Large (L), 65g, Room temperature (20°C), override 23.5°C, Hard, Cold water"
        )


class TestSerialisation:
    """to_dict/from_dict are lossless through JSON."""

    def test_round_trip_with_override(self) -> None:
        params = CookParameters(
            egg_class=EggClass.LARGE,
            mass_grams=67.25,
            start_mode=StartTemperatureMode.FROM_ROOM,
            start_temperature_override=23.5,
            doneness=Doneness.HARD,
            water_start=WaterStartMode.COLD,
        )
        restored = CookParameters.from_dict(json.loads(json.dumps(params.to_dict())))
        assert restored == params
        assert restored.start_temperature == 23.5

    def test_round_trip_without_override(self) -> None:
        params = CookParameters()
        restored = CookParameters.from_dict(json.loads(json.dumps(params.to_dict())))
        assert restored.start_temperature_override is None
        assert restored == params

    def test_unknown_enum_value_raises(self) -> None:
        data = CookParameters().to_dict()
        data["doneness"] = "runny"
        with pytest.raises(ValueError):
            CookParameters.from_dict(data)

    def test_missing_field_raises(self) -> None:
        data = CookParameters().to_dict()
        del data["egg_class"]
        with pytest.raises(ValueError):
            CookParameters.from_dict(data)
