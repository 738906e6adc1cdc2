"""
Derived body-composition metrics: height, FFMI and BCI.

Computed per date from BodyMass (kg), BodyMassIndex, LeanBodyMass (kg) and
BodyFatPercentage (whole percent). Dates missing any input are skipped
silently.
"""

from typing import Any, Iterable
import logging
import math

from .constants import (
    BCI_KEY, BODY_FAT_PERCENTAGE_KEY, BODY_MASS_INDEX_KEY, BODY_MASS_KEY,
    FFMI_KEY, LEAN_BODY_MASS_KEY,
)
from .models import DayRecord, Quantity
from .utils import round_half_up

logger = logging.getLogger(__name__)


def calculate_height(body_mass: float, bmi: float) -> float:
    """Height in meters, from BMI = mass / height^2."""
    return math.sqrt(body_mass / bmi)


def calculate_ffmi(lean_body_mass: float, height: float) -> float:
    """Fat-Free Mass Index: lean mass over height squared."""
    return lean_body_mass / (height * height)


def calculate_bci(ffmi: float, body_fat_fraction: float) -> float:
    """Body-Composition Index: FFMI scaled by the lean fraction (0.15 -> 85%)."""
    return ffmi * (1 - body_fat_fraction)


def _number(value: Any) -> float | None:
    if isinstance(value, Quantity):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def derive_metrics(metrics: dict[str, Any]) -> dict[str, float] | None:
    """
    Compute FFMI and BCI for one day's metrics, or None if inputs are missing.

    Mass and BMI must be present and positive. Body fat must be present and
    non-negative: a reading of 0% is a real reading, not a missing one.
    """
    body_mass = _number(metrics.get(BODY_MASS_KEY))
    bmi = _number(metrics.get(BODY_MASS_INDEX_KEY))
    lean_body_mass = _number(metrics.get(LEAN_BODY_MASS_KEY))
    body_fat = _number(metrics.get(BODY_FAT_PERCENTAGE_KEY))

    if body_mass is None or bmi is None or lean_body_mass is None or body_fat is None:
        return None
    if body_mass <= 0 or bmi <= 0 or lean_body_mass <= 0 or body_fat < 0:
        return None

    height = calculate_height(body_mass, bmi)
    ffmi = calculate_ffmi(lean_body_mass, height)
    bci = calculate_bci(ffmi, body_fat / 100)

    return {
        FFMI_KEY: round_half_up(ffmi),
        BCI_KEY: round_half_up(bci),
    }


def apply_derived_metrics(days: Iterable[DayRecord]) -> int:
    """
    Add FFMI and BCI in place to every day that has all four inputs.

    Returns:
        Number of days that received derived metrics
    """
    updated = 0
    for day in days:
        derived = derive_metrics(day.metrics)
        if derived is None:
            continue
        day.metrics.update(derived)
        updated += 1

    logger.debug(f"Derived body-composition metrics for {updated} days")
    return updated
