# src/tdmengine/dosing.py
from __future__ import annotations

import logging
import math

from .types import DoseModel, ObservedSample

logger = logging.getLogger(__name__)


def dose_model(dose_amount: float, half_life_h: float) -> DoseModel:
    """
    Create a validated bolus dose model.
    Examples:
      - 100 units with a 6 h half-life
      - 1000 units with a 7.5 h half-life
    """
    _validate_positive("dose_amount", dose_amount)
    _validate_positive("half_life_h", half_life_h)
    return DoseModel(dose_amount=float(dose_amount), half_life_h=float(half_life_h))


def observed_sample(time_after_dose_h: float, concentration: float) -> ObservedSample:
    """
    Create a validated measurement.
    time_after_dose_h : hours since the dose (>= 0)
    concentration     : measured level (>= 0)
    """
    _validate_non_negative("time_after_dose_h", time_after_dose_h)
    _validate_non_negative("concentration", concentration)
    return ObservedSample(time_after_dose_h=float(time_after_dose_h), concentration=float(concentration))


def parse_dose_model(dose_text: str | None, half_life_text: str | None) -> DoseModel | None:
    """
    Turn the raw dose / half-life form fields into a DoseModel.

    Blank, unparsable or non-positive fields give None, which the curve
    generator treats as "insufficient input".
    """
    dose = _parse_float(dose_text)
    half_life = _parse_float(half_life_text)
    if dose is None or half_life is None:
        return None
    try:
        return dose_model(dose, half_life)
    except ValueError as exc:
        logger.debug("Ignoring dose fields: %s", exc)
        return None


def adjust_dose_model(model: DoseModel, *, dose_amount: float | None = None,
                      half_life_h: float | None = None) -> DoseModel:
    """
    Derive a what-if model from the current one (dose adjustment or
    half-life/interval adjustment). Fields left as None are kept.
    """
    return dose_model(
        model.dose_amount if dose_amount is None else dose_amount,
        model.half_life_h if half_life_h is None else half_life_h,
    )


def _parse_float(text: str | None) -> float | None:
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        logger.debug("Not a number: %r", text)
        return None


# --------------------------
# Small input validators
# --------------------------
def _validate_positive(name: str, x: float) -> None:
    if not (math.isfinite(x) and x > 0):
        raise ValueError(f"{name} must be > 0 (got {x}).")

def _validate_non_negative(name: str, x: float) -> None:
    if not (math.isfinite(x) and x >= 0):
        raise ValueError(f"{name} must be >= 0 (got {x}).")
