# src/tdmengine/types.py
from __future__ import annotations

import math
from dataclasses import dataclass

from .config import DISPLAY_DECIMALS

# All time in HOURS, concentrations in the unit the samples were recorded in.


@dataclass(frozen=True)
class DoseModel:
    """
    A single IV bolus in a one-compartment model with first-order elimination.

    dose_amount : initial concentration-equivalent of the bolus (> 0)
    half_life_h : elimination half-life in hours (> 0)
    """
    dose_amount: float
    half_life_h: float

    @property
    def elimination_rate(self) -> float:
        """k = ln(2) / t½ (1/h)."""
        return math.log(2.0) / self.half_life_h


@dataclass(frozen=True)
class ObservedSample:
    """
    A measured blood concentration at a known offset from the dose.

    time_after_dose_h : hours between administration and sampling (>= 0)
    concentration     : measured concentration (>= 0)
    """
    time_after_dose_h: float
    concentration: float


@dataclass(frozen=True)
class PredictedPoint:
    """One row of the simulated curve. observed_concentration is None unless a sample matched."""
    time_h: float
    predicted_concentration: float
    observed_concentration: float | None = None


@dataclass(frozen=True)
class PKParameterEstimate:
    """
    PK parameters derived from observed samples only (never from a DoseModel).

    half_life_h       : ln(2) / k, inf when no elimination is observed
    elimination_rate  : k (1/h), two-point estimate
    auc               : trapezoidal AUC over the sorted samples
    max_concentration : Cmax
    time_to_max_h     : Tmax
    """
    half_life_h: float
    elimination_rate: float
    auc: float
    max_concentration: float
    time_to_max_h: float

    def as_display(self) -> dict[str, str]:
        """Render every field at its fixed display precision ("N/A" for non-finite values)."""
        return {name: _fixed(getattr(self, name), places) for name, places in DISPLAY_DECIMALS.items()}


@dataclass(frozen=True)
class ConcentrationSummary:
    """Overview of a sample set: count, time span, concentration span, mean."""
    n_samples: int
    time_range_h: tuple[float, float]
    concentration_range: tuple[float, float]
    mean_concentration: float


def _fixed(value: float, places: int) -> str:
    if not math.isfinite(value):
        return "N/A"
    return f"{value:.{places}f}"
