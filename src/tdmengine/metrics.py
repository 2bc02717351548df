# src/tdmengine/metrics.py
from __future__ import annotations

import logging
import math
from typing import Sequence, Tuple

import numpy as np

from .config import MIN_SAMPLES
from .types import ConcentrationSummary, ObservedSample, PKParameterEstimate

logger = logging.getLogger(__name__)


def _as_arrays(samples: Sequence[ObservedSample]) -> Tuple[np.ndarray, np.ndarray]:
    t = np.array([s.time_after_dose_h for s in samples], dtype=float)
    C = np.array([s.concentration for s in samples], dtype=float)
    return t, C

def sort_samples(samples: Sequence[ObservedSample]) -> list[ObservedSample]:
    """Samples ordered by time after dose; equal times keep their input order."""
    t, _ = _as_arrays(samples)
    order = np.argsort(t, kind="stable")
    return [samples[int(i)] for i in order]

def elimination_rate(first: ObservedSample, last: ObservedSample) -> float:
    """
    Two-point log-linear elimination rate constant (1/h):
      k = ln(C_first / C_last) / (t_last - t_first)
    Intermediate samples are not used. A non-positive concentration at
    either end makes the log undefined and gives NaN.
    """
    if first.concentration <= 0 or last.concentration <= 0:
        return float("nan")
    dt = last.time_after_dose_h - first.time_after_dose_h
    return math.log(first.concentration / last.concentration) / dt

def half_life_from_rate(k: float) -> float:
    """t½ = ln(2) / k (h). No elimination (k <= 0) gives inf, NaN stays NaN."""
    if math.isnan(k):
        return float("nan")
    if k <= 0:
        return float("inf")
    return math.log(2.0) / k

def auc_trapz(t: np.ndarray, C: np.ndarray) -> float:
    """Area Under the Curve (AUC) via trapezoidal rule. t must already be sorted."""
    if len(t) < 2:
        return 0.0
    return float(np.trapezoid(C, t))

def cmax_tmax(t: np.ndarray, C: np.ndarray) -> Tuple[float, float]:
    """
    Return Cmax and Tmax. Ties resolve to the first occurrence in the
    given order.
    """
    idx = int(np.argmax(C))
    return float(C[idx]), float(t[idx])


def estimate_parameters(observed: Sequence[ObservedSample]) -> PKParameterEstimate | None:
    """
    Estimate half-life, elimination rate, AUC, Cmax and Tmax from measured
    levels of one drug.

    Returns None ("no parameters available") when fewer than two samples
    are given or when the earliest and latest samples share the same time.

    A non-positive concentration at the earliest or latest sample leaves
    the rate and half-life as NaN; the other fields are still computed.
    Tmax is the time of the first sample, in input order, that holds the
    maximum. It is located by index, not by re-comparing concentrations.
    """
    if len(observed) < MIN_SAMPLES:
        logger.debug("Need at least %d samples, got %d", MIN_SAMPLES, len(observed))
        return None

    ordered = sort_samples(observed)
    first, last = ordered[0], ordered[-1]
    if first.time_after_dose_h == last.time_after_dose_h:
        logger.debug("All samples at t=%s h, elimination rate undefined", first.time_after_dose_h)
        return None

    k = elimination_rate(first, last)
    if math.isnan(k):
        logger.debug("Non-positive endpoint concentration (%s, %s), rate left as NaN",
                     first.concentration, last.concentration)
    t_sorted, C_sorted = _as_arrays(ordered)
    t_input, C_input = _as_arrays(observed)
    c_max, t_max = cmax_tmax(t_input, C_input)

    return PKParameterEstimate(
        half_life_h=half_life_from_rate(k),
        elimination_rate=k,
        auc=auc_trapz(t_sorted, C_sorted),
        max_concentration=c_max,
        time_to_max_h=t_max,
    )


def summarize_concentrations(observed: Sequence[ObservedSample]) -> ConcentrationSummary | None:
    """Count, time range, concentration range and mean of a sample set. None when empty."""
    if len(observed) == 0:
        return None
    t, C = _as_arrays(observed)
    return ConcentrationSummary(
        n_samples=len(observed),
        time_range_h=(float(np.min(t)), float(np.max(t))),
        concentration_range=(float(np.min(C)), float(np.max(C))),
        mean_concentration=float(np.mean(C)),
    )
