import math
import numpy as np
import pytest
from scipy.integrate import solve_ivp

from tdmengine.types import DoseModel, ObservedSample
from tdmengine.dosing import dose_model
from tdmengine.curve import generate_curve, curve_arrays, predicted_concentration


def test_iv_bolus_matches_ode_solution():
    """
    The closed-form curve C(t) = D * exp(-k t) should agree with a numerical
    solution of dC/dt = -k C, C(0) = D.
    """
    dose = dose_model(100.0, 6.0)
    points = generate_curve(dose, [])
    t, C, _ = curve_arrays(points)

    k = dose.elimination_rate
    sol = solve_ivp(lambda _t, y: -k * y, t_span=(0.0, t[-1]), y0=[dose.dose_amount],
                    t_eval=t, method="RK45", rtol=1e-8, atol=1e-10)

    assert sol.success
    assert np.allclose(C, sol.y[0], rtol=1e-5, atol=1e-8)


def test_default_grid_has_49_points_starting_at_dose():
    """t = 0, 0.5, ..., 24 h inclusive, and the first point is the dose itself."""
    for half_life in (0.25, 1.0, 6.0, 48.0, 1000.0):
        points = generate_curve(DoseModel(250.0, half_life), [])
        assert len(points) == 49
        assert points[0].time_h == 0.0
        assert points[-1].time_h == 24.0
        assert points[0].predicted_concentration == 250.0


def test_curve_strictly_decreasing():
    points = generate_curve(DoseModel(100.0, 8.0), [])
    _, C, _ = curve_arrays(points)
    assert np.all(np.diff(C) < 0)


def test_one_and_two_half_lives():
    """dose=100, t½=6 h: 50 after 6 h, 25 after 12 h."""
    points = {p.time_h: p.predicted_concentration for p in generate_curve(DoseModel(100.0, 6.0), [])}
    assert points[6.0] == pytest.approx(50.0)
    assert points[12.0] == pytest.approx(25.0)
    assert float(predicted_concentration(DoseModel(100.0, 6.0), 18.0)) == pytest.approx(12.5)


@pytest.mark.parametrize("dose", [
    None,
    DoseModel(0.0, 6.0),
    DoseModel(100.0, 0.0),
    DoseModel(-5.0, 6.0),
    DoseModel(100.0, -1.0),
    DoseModel(float("nan"), 6.0),
])
def test_insufficient_dose_input_gives_empty_curve(dose):
    assert generate_curve(dose, [ObservedSample(1.0, 10.0)]) == []


def test_observed_samples_attach_within_tolerance():
    observed = [
        ObservedSample(2.2, 40.0),   # within 0.5 of 2.0 and of 2.5
        ObservedSample(10.0, 12.0),  # exactly on the grid
        ObservedSample(30.0, 1.0),   # beyond the horizon
    ]
    by_time = {p.time_h: p.observed_concentration for p in generate_curve(DoseModel(100.0, 6.0), observed)}

    assert by_time[2.0] == 40.0
    assert by_time[2.5] == 40.0
    assert by_time[10.0] == 12.0
    # |9.5 - 10| == 0.5 is not strictly inside the tolerance
    assert by_time[9.5] is None
    assert by_time[10.5] is None
    assert by_time[0.0] is None
    assert all(v is None for t, v in by_time.items() if t > 20)


def test_first_sample_in_input_order_wins_ties():
    observed = [ObservedSample(4.1, 7.0), ObservedSample(3.9, 9.0)]
    by_time = {p.time_h: p.observed_concentration for p in generate_curve(DoseModel(100.0, 6.0), observed)}
    assert by_time[4.0] == 7.0


def test_custom_grid():
    points = generate_curve(DoseModel(10.0, 2.0), [], t_end_h=12.0, dt_h=1.0)
    assert len(points) == 13
    assert [p.time_h for p in points[:3]] == [0.0, 1.0, 2.0]


def test_curve_arrays_marks_missing_observations_as_nan():
    points = generate_curve(DoseModel(100.0, 6.0), [ObservedSample(1.0, 80.0)])
    t, predicted, observed = curve_arrays(points)
    assert len(t) == len(predicted) == len(observed) == 49
    assert observed[2] == 80.0
    assert np.isnan(observed[0])
    assert np.sum(~np.isnan(observed)) == 1
    assert math.isclose(predicted[0], 100.0)
