"""Duration estimator — boiling time for an egg from its cooking parameters.

The primary result comes from an idealised heat-conduction model::

    t = |M^(2/3) * c * rho^(1/3) / (K * pi^2 * alpha) * ln(0.76 * (T0 - Tw) / (Ty - Tw))|

Near its boundary conditions that model is undefined or implausible, so the
estimator falls back to one of two empirical formulas instead of failing.
The two fallbacks use different base times, consistency factors and
temperature normalisations; both are kept exactly as they are.
"""

from __future__ import annotations

import logging
import math

from eggtimer.core.parameters import CookParameters, Doneness

_LOGGER = logging.getLogger(__name__)

WATER_TEMPERATURE = 100.0  # Tw, °C
HEAT_CAPACITY = 3.7  # c, J/gK
DENSITY = 1.038  # rho, g/cm³
SHAPE_FACTOR = 1.0  # K, dimensionless
THERMAL_DIFFUSIVITY = 0.0011  # alpha, cm²/s

GUARD_FALLBACK_SECONDS = 180.0
MIN_PLAUSIBLE_SECONDS = 60.0
MAX_PLAUSIBLE_SECONDS = 1200.0

_REFERENCE_MASS = 55.0
_MASS_EXPONENT = 0.67

_LOG_FALLBACK_BASE = 180.0
_LOG_FALLBACK_FACTOR = {Doneness.SOFT: 0.8, Doneness.MEDIUM: 1.0, Doneness.HARD: 1.3}

_SANITY_FALLBACK_BASE = 240.0
_SANITY_FALLBACK_REFERENCE_START = 20.0
_SANITY_FALLBACK_FACTOR = {Doneness.SOFT: 0.7, Doneness.MEDIUM: 1.0, Doneness.HARD: 1.4}


def estimate(params: CookParameters) -> float:
    """Return the total recommended duration in seconds.

    Water heat-up time plus egg cooking time.  Pure and total: every
    parameter combination yields some duration.
    """
    return params.water_start.heatup_seconds + egg_cooking_seconds(params)


def egg_cooking_seconds(params: CookParameters) -> float:
    """Return the cooking time in seconds, excluding water heat-up."""
    tw = WATER_TEMPERATURE
    t0 = params.start_temperature
    ty = params.doneness.target_temperature
    mass = params.mass_grams

    if not (tw > ty and tw > t0 and 0 < mass < math.inf):
        _LOGGER.debug("Parameters outside the model (T0=%s, Ty=%s, M=%s)", t0, ty, mass)
        return GUARD_FALLBACK_SECONDS

    denominator = ty - tw
    ratio = 0.76 * (t0 - tw) / denominator if denominator != 0 else 0.0
    if denominator == 0 or ratio <= 0:
        _LOGGER.debug("Logarithm undefined for ratio %s, using empirical fallback", ratio)
        return _log_fallback(mass, t0, ty, params.doneness)

    ln_term = math.log(ratio)
    time = abs(
        (mass ** (2.0 / 3.0) * HEAT_CAPACITY * DENSITY ** (1.0 / 3.0))
        / (SHAPE_FACTOR * math.pi * math.pi * THERMAL_DIFFUSIVITY)
        * ln_term
    )

    if time < MIN_PLAUSIBLE_SECONDS or time > MAX_PLAUSIBLE_SECONDS:
        _LOGGER.debug("Model result %.1fs out of range, using empirical fallback", time)
        return _sanity_fallback(mass, t0, params.doneness)
    return time


def _log_fallback(mass: float, t0: float, ty: float, doneness: Doneness) -> float:
    weight_factor = (mass / _REFERENCE_MASS) ** _MASS_EXPONENT
    temp_factor = (ty - t0) / (100.0 - t0)
    return _LOG_FALLBACK_BASE * weight_factor * temp_factor * _LOG_FALLBACK_FACTOR[doneness]


def _sanity_fallback(mass: float, t0: float, doneness: Doneness) -> float:
    weight_factor = (mass / _REFERENCE_MASS) ** _MASS_EXPONENT
    temp_factor = (100.0 - t0) / (100.0 - _SANITY_FALLBACK_REFERENCE_START)
    return _SANITY_FALLBACK_BASE * weight_factor * temp_factor * _SANITY_FALLBACK_FACTOR[doneness]


# -- display helpers -----------------------------------------------------------


def format_clock(seconds: float) -> str:
    """Format *seconds* as ``MM:SS`` for the running countdown."""
    total = int(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"


def format_preview(seconds: float) -> str:
    """Format *seconds* as ``M:SS`` for the parameter preview."""
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"
