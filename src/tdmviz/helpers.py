# src/tdmviz/helpers.py
from collections import defaultdict
from typing import Iterable, Sequence

from tdmengine.types import ObservedSample
from .records import BloodTest, Prescription


def for_patient(records: Iterable, patient_id: str | None) -> list:
    """Records belonging to one patient (none when no patient is selected)."""
    if not patient_id:
        return []
    return [r for r in records if r.patient_id == patient_id]

def split_tests_by_drug(tests: Iterable[BloodTest]) -> dict[str, list[BloodTest]]:
    """
    Group blood tests by drug_name, keeping entry order within each drug.
    """
    buckets: dict[str, list[BloodTest]] = defaultdict(list)
    for b in tests:
        buckets[b.drug_name].append(b)
    return dict(buckets)

def available_drugs(prescriptions: Sequence[Prescription], tests: Sequence[BloodTest]) -> list[str]:
    """Unique drug names, prescriptions first, in first-seen order."""
    seen = dict.fromkeys(p.drug_name for p in prescriptions)
    seen.update(dict.fromkeys(b.drug_name for b in tests))
    return list(seen)

def samples_from_tests(tests: Iterable[BloodTest]) -> list[ObservedSample]:
    """Blood tests as ObservedSample values for the calculator, in entry order."""
    return [
        ObservedSample(time_after_dose_h=float(b.time_after_dose_h), concentration=float(b.concentration))
        for b in tests
    ]
