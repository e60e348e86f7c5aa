"""Tests for parameter validation."""

import pytest

from eggtimer.core.parameters import CookParameters, EggClass
from eggtimer.core.validator import ValidationResult, validate


class TestValidateMass:
    """Mass must lie within [30, 90] grams inclusive."""

    @pytest.mark.parametrize("egg_class", list(EggClass))
    def test_default_masses_are_valid(self, egg_class: EggClass) -> None:
        assert validate(CookParameters(egg_class=egg_class)).is_valid

    @pytest.mark.parametrize("mass", [30.0, 90.0])
    def test_bounds_are_inclusive(self, mass: float) -> None:
        assert validate(CookParameters(mass_grams=mass)).is_valid

    def test_light_egg_gives_exactly_one_message(self) -> None:
        result = validate(CookParameters(mass_grams=20))
        assert not result.is_valid
        assert result.messages == ("Mass must be between 30g and 90g",)

    @pytest.mark.parametrize("mass", [29.9, 90.1, -1.0, float("nan"), float("inf")])
    def test_out_of_bounds(self, mass: float) -> None:
        assert len(validate(CookParameters(mass_grams=mass)).messages) == 1


class TestValidationResult:
    def test_empty_result_is_valid(self) -> None:
        assert ValidationResult().is_valid

    def test_result_with_message_is_invalid(self) -> None:
        assert not ValidationResult(("nope",)).is_valid
