# src/tdmengine/config.py

# Simulation grid: t = 0, 0.5, ..., 24 h (49 points)
CURVE_HORIZON_H = 24.0
CURVE_STEP_H = 0.5

# An observed sample is attached to a grid point when |t_sample - t| < tolerance
MATCH_TOLERANCE_H = 0.5

# Minimum number of samples for a parameter estimate
MIN_SAMPLES = 2

# Decimal places used when the estimate is rendered for display
DISPLAY_DECIMALS = {
    "half_life_h": 2,
    "elimination_rate": 4,
    "auc": 2,
    "max_concentration": 2,
    "time_to_max_h": 1,
}

BMI_DECIMALS = 1
BSA_DECIMALS = 2

CONCENTRATION_UNIT = "ng/mL"
AUC_UNIT = "ng·h/mL"
