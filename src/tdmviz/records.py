# src/tdmviz/records.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date, datetime


@dataclass(frozen=True)
class Patient:
    """
    A registered patient.

    weight_kg / height_cm feed the BMI and BSA shown in every patient view.
    """
    id: str
    name: str
    age: int
    weight_kg: float
    height_cm: float
    gender: str = ""
    medical_history: str = ""
    allergies: str = ""
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Prescription:
    """
    A TDM drug prescription.

    tdm_target       : kind of target monitored (e.g. "trough", "peak", "AUC")
    tdm_target_value : target value/range as entered (e.g. "10-15 mg/L")
    """
    id: str
    patient_id: str
    drug_name: str
    dosage: float
    unit: str
    frequency: str
    route: str
    prescribed_by: str
    start_date: date
    end_date: date | None = None
    indication: str = ""
    tdm_target: str = ""
    tdm_target_value: str = ""


@dataclass(frozen=True)
class BloodTest:
    """A measured drug level, time_after_dose_h hours after the dose."""
    id: str
    patient_id: str
    drug_name: str
    concentration: float
    unit: str
    time_after_dose_h: float
    test_date: datetime
    notes: str = ""


@dataclass(frozen=True)
class DrugAdministration:
    """
    One logged administration.

    date / time       : "YYYY-MM-DD" / "HH:mm" as entered
    infusion_time_min : IV infusion duration (minutes), IV only
    administration_time_min : time taken for other routes (minutes)
    """
    id: str
    patient_id: str
    drug_name: str
    route: str
    date: str
    time: str
    dose: float
    unit: str
    is_iv_infusion: bool = False
    infusion_time_min: float | None = None
    administration_time_min: float | None = None


# --------------------------
# JSON-compatible conversion
# --------------------------
_DATETIME_FIELDS = {"created_at", "test_date"}
_DATE_FIELDS = {"start_date", "end_date"}


def record_to_dict(record) -> dict:
    out = {}
    for f in fields(record):
        value = getattr(record, f.name)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        out[f.name] = value
    return out


def record_from_dict(cls, data: dict):
    kwargs = dict(data)
    for name in _DATETIME_FIELDS & kwargs.keys():
        kwargs[name] = datetime.fromisoformat(kwargs[name])
    for name in _DATE_FIELDS & kwargs.keys():
        if kwargs[name] is not None:
            kwargs[name] = date.fromisoformat(kwargs[name])
    return cls(**kwargs)
