# src/tdmengine/curve.py
from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .config import CURVE_HORIZON_H, CURVE_STEP_H, MATCH_TOLERANCE_H
from .types import DoseModel, ObservedSample, PredictedPoint

logger = logging.getLogger(__name__)


def predicted_concentration(dose: DoseModel, t_h):
    """C(t) = dose * exp(-k t) with k = ln(2) / t½. Accepts a scalar or an array of times."""
    return dose.dose_amount * np.exp(-dose.elimination_rate * np.asarray(t_h, dtype=float))


def generate_curve(dose: DoseModel | None, observed: Sequence[ObservedSample], *,
                   t_end_h: float = CURVE_HORIZON_H, dt_h: float = CURVE_STEP_H,
                   tolerance_h: float = MATCH_TOLERANCE_H) -> list[PredictedPoint]:
    """
    Simulate a one-compartment IV bolus with first-order elimination on a
    fixed grid t = 0, dt, ..., t_end (inclusive) and attach observed levels.

    An observed sample is attached to a grid point when it lies strictly
    within tolerance_h of it. If several samples qualify, the first one in
    input order is used; that choice is arbitrary and should not be relied on.

    Returns an empty list when the dose model is missing or has a
    non-positive dose or half-life ("insufficient input").
    """
    if not _usable(dose):
        logger.debug("Insufficient dose input, no curve generated: %r", dose)
        return []

    # Integer step count keeps the grid exact (0.5 h steps are representable)
    n_steps = int(round(t_end_h / dt_h))
    t_grid = np.arange(n_steps + 1, dtype=float) * dt_h
    C = predicted_concentration(dose, t_grid)

    return [
        PredictedPoint(
            time_h=float(t),
            predicted_concentration=float(c),
            observed_concentration=_match_observed(observed, float(t), tolerance_h),
        )
        for t, c in zip(t_grid, C)
    ]


def curve_arrays(points: Sequence[PredictedPoint]) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Split a curve into (t, predicted, observed) arrays for plotting.
    Grid points without an observation hold NaN in the observed array.
    """
    t = np.array([p.time_h for p in points], dtype=float)
    predicted = np.array([p.predicted_concentration for p in points], dtype=float)
    observed = np.array(
        [np.nan if p.observed_concentration is None else p.observed_concentration for p in points],
        dtype=float,
    )
    return t, predicted, observed


def _match_observed(observed: Sequence[ObservedSample], t_h: float, tolerance_h: float) -> float | None:
    for sample in observed:
        if abs(sample.time_after_dose_h - t_h) < tolerance_h:
            return sample.concentration
    return None


def _usable(dose: DoseModel | None) -> bool:
    if dose is None:
        return False
    for value in (dose.dose_amount, dose.half_life_h):
        if value is None or not math.isfinite(value) or value <= 0:
            return False
    return True
