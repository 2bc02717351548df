# src/tdmengine/body.py
from __future__ import annotations

import math

from .config import BMI_DECIMALS, BSA_DECIMALS


def compute_bmi(weight_kg: float | None, height_cm: float | None) -> float | None:
    """Body-mass index, kg/m². None when either input is missing or not positive."""
    if not _present(weight_kg, height_cm):
        return None
    height_m = height_cm / 100.0
    return weight_kg / (height_m ** 2)

def compute_bsa(weight_kg: float | None, height_cm: float | None) -> float | None:
    """Body-surface area (Mosteller), m²: sqrt(weight_kg * height_cm / 3600)."""
    if not _present(weight_kg, height_cm):
        return None
    return math.sqrt(weight_kg * height_cm / 3600.0)

def format_bmi(weight_kg: float | None, height_cm: float | None) -> str:
    bmi = compute_bmi(weight_kg, height_cm)
    return "" if bmi is None else f"{bmi:.{BMI_DECIMALS}f}"

def format_bsa(weight_kg: float | None, height_cm: float | None) -> str:
    bsa = compute_bsa(weight_kg, height_cm)
    return "" if bsa is None else f"{bsa:.{BSA_DECIMALS}f}"


def _present(*values: float | None) -> bool:
    return all(v is not None and math.isfinite(v) and v > 0 for v in values)
