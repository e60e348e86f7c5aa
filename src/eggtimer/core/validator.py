"""Validator — bounds checks on cook parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from eggtimer.core.parameters import CookParameters

MIN_MASS_GRAMS = 30.0
MAX_MASS_GRAMS = 90.0


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate`; invalid iff ``messages`` is non-empty."""

    messages: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.messages


def _check_mass(params: CookParameters) -> Optional[str]:
    if not (MIN_MASS_GRAMS <= params.mass_grams <= MAX_MASS_GRAMS):
        return f"Mass must be between {MIN_MASS_GRAMS:g}g and {MAX_MASS_GRAMS:g}g"
    return None


_CHECKS: tuple[Callable[[CookParameters], Optional[str]], ...] = (_check_mass,)


def validate(params: CookParameters) -> ValidationResult:
    """Run every check against *params*; each failing check adds one message."""
    messages = []
    for check in _CHECKS:
        message = check(params)
        if message is not None:
            messages.append(message)
    return ValidationResult(tuple(messages))
