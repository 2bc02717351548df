# src/tdmviz/state.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from tdmengine.curve import generate_curve
from tdmengine.dosing import adjust_dose_model, parse_dose_model
from tdmengine.metrics import estimate_parameters, summarize_concentrations
from tdmengine.types import ConcentrationSummary, DoseModel, ObservedSample, PKParameterEstimate, PredictedPoint

from .helpers import available_drugs, for_patient, samples_from_tests
from .records import (
    BloodTest, DrugAdministration, Patient, Prescription,
    record_from_dict, record_to_dict,
)

logger = logging.getLogger(__name__)

WORKFLOW_STEPS = ("patient", "prescription", "blood_test", "administration", "simulation")


@dataclass
class SimulationParams:
    """Raw simulation form fields, kept as entered."""
    dose: str = ""
    half_life: str = ""
    clearance: str = ""
    volume_distribution: str = ""


@dataclass
class AppState:
    """
    Everything the host UI holds: the record stores, the current selection
    and the simulation form. Derived values (curve, parameters, summary)
    are recomputed from it on every call and never stored.
    """
    patients: list[Patient] = field(default_factory=list)
    prescriptions: list[Prescription] = field(default_factory=list)
    blood_tests: list[BloodTest] = field(default_factory=list)
    administrations: list[DrugAdministration] = field(default_factory=list)
    selected_patient_id: str | None = None
    selected_drug: str | None = None
    simulation: SimulationParams = field(default_factory=SimulationParams)

    # --- records ---
    def add_patient(self, patient: Patient) -> None:
        if self._find_patient(patient.id) is not None:
            raise ValueError(f"Patient id '{patient.id}' already registered.")
        self.patients.append(patient)
        self.select_patient(patient.id)

    def update_patient(self, patient: Patient) -> None:
        for i, p in enumerate(self.patients):
            if p.id == patient.id:
                self.patients[i] = patient
                return
        raise KeyError(f"Unknown patient_id '{patient.id}'.")

    def add_prescription(self, prescription: Prescription) -> None:
        self._require_patient(prescription.patient_id)
        self.prescriptions.append(prescription)

    def add_blood_test(self, test: BloodTest) -> None:
        self._require_patient(test.patient_id)
        self.blood_tests.append(test)

    def add_administration(self, administration: DrugAdministration) -> None:
        self._require_patient(administration.patient_id)
        self.administrations.append(administration)

    # --- selection ---
    def select_patient(self, patient_id: str | None) -> None:
        if patient_id is not None:
            self._require_patient(patient_id)
        if patient_id != self.selected_patient_id:
            self.selected_drug = None
        self.selected_patient_id = patient_id

    def select_drug(self, drug_name: str | None) -> None:
        if drug_name is not None and drug_name not in self.available_drugs():
            raise KeyError(f"No records for drug '{drug_name}' for the selected patient.")
        self.selected_drug = drug_name

    def set_simulation_params(self, **fields_) -> None:
        self.simulation = replace(self.simulation, **fields_)

    @property
    def selected_patient(self) -> Patient | None:
        return self._find_patient(self.selected_patient_id)

    def available_drugs(self) -> list[str]:
        return available_drugs(
            for_patient(self.prescriptions, self.selected_patient_id),
            for_patient(self.blood_tests, self.selected_patient_id),
        )

    def selected_samples(self) -> list[ObservedSample]:
        """Samples of the selected patient and drug, in entry order."""
        if not self.selected_drug:
            return []
        tests = [b for b in for_patient(self.blood_tests, self.selected_patient_id)
                 if b.drug_name == self.selected_drug]
        return samples_from_tests(tests)

    # --- derived values ---
    def dose_model(self) -> DoseModel | None:
        return parse_dose_model(self.simulation.dose, self.simulation.half_life)

    def curve(self) -> list[PredictedPoint]:
        return generate_curve(self.dose_model(), self.selected_samples())

    def scenario_curve(self, *, dose: float | None = None, half_life_h: float | None = None) -> list[PredictedPoint]:
        """
        Curve for a what-if regimen: the current model with the dose and/or
        half-life replaced. Empty when the current model is incomplete.
        """
        model = self.dose_model()
        if model is None:
            return []
        return generate_curve(adjust_dose_model(model, dose_amount=dose, half_life_h=half_life_h),
                              self.selected_samples())

    def parameters(self) -> PKParameterEstimate | None:
        return estimate_parameters(self.selected_samples())

    def summary(self) -> ConcentrationSummary | None:
        return summarize_concentrations(self.selected_samples())

    # --- workflow ---
    def completed_steps(self) -> dict[str, bool]:
        pid = self.selected_patient_id
        has_patient = self.selected_patient is not None
        has_rx = has_patient and bool(for_patient(self.prescriptions, pid))
        has_tests = has_patient and bool(for_patient(self.blood_tests, pid))
        has_admin = has_patient and bool(for_patient(self.administrations, pid))
        return {
            "patient": has_patient,
            "prescription": has_rx,
            "blood_test": has_tests,
            "administration": has_admin,
            "simulation": has_rx and has_tests and has_admin,
        }

    def progress_percent(self) -> float:
        done = sum(self.completed_steps().values())
        return done / len(WORKFLOW_STEPS) * 100.0

    def can_access_step(self, step: str) -> bool:
        idx = WORKFLOW_STEPS.index(step)
        if idx == 0:
            return True
        return self.completed_steps()[WORKFLOW_STEPS[idx - 1]]

    # --- serialization ---
    def to_dict(self) -> dict:
        return {
            "patients": [record_to_dict(p) for p in self.patients],
            "prescriptions": [record_to_dict(p) for p in self.prescriptions],
            "blood_tests": [record_to_dict(b) for b in self.blood_tests],
            "administrations": [record_to_dict(a) for a in self.administrations],
            "selected_patient_id": self.selected_patient_id,
            "selected_drug": self.selected_drug,
            "simulation": {
                "dose": self.simulation.dose,
                "half_life": self.simulation.half_life,
                "clearance": self.simulation.clearance,
                "volume_distribution": self.simulation.volume_distribution,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppState":
        return cls(
            patients=[record_from_dict(Patient, d) for d in data.get("patients", [])],
            prescriptions=[record_from_dict(Prescription, d) for d in data.get("prescriptions", [])],
            blood_tests=[record_from_dict(BloodTest, d) for d in data.get("blood_tests", [])],
            administrations=[record_from_dict(DrugAdministration, d) for d in data.get("administrations", [])],
            selected_patient_id=data.get("selected_patient_id"),
            selected_drug=data.get("selected_drug"),
            simulation=SimulationParams(**data.get("simulation", {})),
        )

    # --- internals ---
    def _find_patient(self, patient_id: str | None) -> Patient | None:
        for p in self.patients:
            if p.id == patient_id:
                return p
        return None

    def _require_patient(self, patient_id: str) -> None:
        if self._find_patient(patient_id) is None:
            logger.warning("Rejected record for unknown patient_id '%s'", patient_id)
            raise KeyError(f"Unknown patient_id '{patient_id}'.")
