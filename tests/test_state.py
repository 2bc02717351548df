import json
from datetime import date, datetime

import pytest

from tdmviz.records import Patient, Prescription, BloodTest, DrugAdministration
from tdmviz.state import AppState
from tdmviz.helpers import available_drugs, split_tests_by_drug, samples_from_tests


def _patient(pid="p1", name="Kim"):
    return Patient(id=pid, name=name, age=54, weight_kg=70.0, height_cm=175.0,
                   created_at=datetime(2024, 3, 1, 9, 30))

def _rx(pid="p1", drug="vancomycin"):
    return Prescription(id=f"rx-{drug}", patient_id=pid, drug_name=drug, dosage=1000, unit="mg",
                        frequency="q12h", route="IV", prescribed_by="Dr. Lee",
                        start_date=date(2024, 3, 1), tdm_target="trough", tdm_target_value="10-15 mg/L")

def _test(tid, t_h, conc, pid="p1", drug="vancomycin"):
    return BloodTest(id=tid, patient_id=pid, drug_name=drug, concentration=conc, unit="ng/mL",
                     time_after_dose_h=t_h, test_date=datetime(2024, 3, 2, 8, 0))

def _admin(pid="p1"):
    return DrugAdministration(id="a1", patient_id=pid, drug_name="vancomycin", route="IV",
                              date="2024-03-01", time="20:00", dose=1000, unit="mg",
                              is_iv_infusion=True, infusion_time_min=60)


@pytest.fixture
def state():
    s = AppState()
    s.add_patient(_patient())
    s.add_prescription(_rx())
    s.add_blood_test(_test("b1", 8.0, 25.0))
    s.add_blood_test(_test("b2", 2.0, 100.0))
    s.add_blood_test(_test("b3", 1.0, 3.0, drug="amikacin"))
    return s


def test_workflow_progress(state):
    steps = state.completed_steps()
    assert steps == {"patient": True, "prescription": True, "blood_test": True,
                     "administration": False, "simulation": False}
    assert state.progress_percent() == pytest.approx(60.0)
    assert state.can_access_step("administration")
    assert not state.can_access_step("simulation")

    state.add_administration(_admin())
    assert state.progress_percent() == pytest.approx(100.0)

    assert AppState().progress_percent() == 0.0
    assert AppState().can_access_step("patient")


def test_records_require_known_patient(state):
    with pytest.raises(KeyError):
        state.add_blood_test(_test("bx", 1.0, 1.0, pid="nobody"))
    with pytest.raises(KeyError):
        state.select_patient("nobody")
    with pytest.raises(ValueError):
        state.add_patient(_patient())


def test_drug_selection_and_derived_values(state):
    assert state.available_drugs() == ["vancomycin", "amikacin"]
    assert state.curve() == []
    assert state.parameters() is None

    state.select_drug("vancomycin")
    state.set_simulation_params(dose="100", half_life="6")
    points = state.curve()
    assert len(points) == 49
    assert points[4].observed_concentration == 100.0   # t = 2 h
    assert points[16].observed_concentration == 25.0   # t = 8 h

    est = state.parameters()
    assert est.half_life_h == pytest.approx(3.0)
    assert est.time_to_max_h == 2.0
    assert state.summary().n_samples == 2

    with pytest.raises(KeyError):
        state.select_drug("gentamicin")


def test_scenario_curves(state):
    state.select_drug("vancomycin")
    assert state.scenario_curve(dose=200) == []

    state.set_simulation_params(dose="100", half_life="6")
    higher = state.scenario_curve(dose=200)
    longer = state.scenario_curve(half_life_h=12)
    assert higher[0].predicted_concentration == 200.0
    assert longer[24].predicted_concentration == pytest.approx(50.0)  # t = 12 h
    # the stored form fields are untouched
    assert state.dose_model().dose_amount == 100.0


def test_switching_patient_clears_drug(state):
    state.add_patient(_patient("p2", "Park"))
    assert state.selected_patient_id == "p2"
    assert state.available_drugs() == []
    state.select_patient("p1")
    state.select_drug("amikacin")
    state.select_patient("p2")
    assert state.selected_drug is None
    assert state.selected_samples() == []


def test_serialization_round_trip(state):
    state.add_administration(_admin())
    state.select_drug("vancomycin")
    state.set_simulation_params(dose="100", half_life="6")

    payload = json.dumps(state.to_dict())
    restored = AppState.from_dict(json.loads(payload))

    assert restored == state
    assert restored.parameters() == state.parameters()


def test_helpers():
    tests = [_test("b1", 1.0, 5.0), _test("b2", 2.0, 4.0, drug="amikacin"), _test("b3", 3.0, 3.0)]
    groups = split_tests_by_drug(tests)
    assert [b.id for b in groups["vancomycin"]] == ["b1", "b3"]
    assert available_drugs([_rx(drug="amikacin")], tests) == ["amikacin", "vancomycin"]
    assert [s.concentration for s in samples_from_tests(tests)] == [5.0, 4.0, 3.0]
