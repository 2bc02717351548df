# src/tdmviz/ui/controls.py
from dataclasses import dataclass
from PySide6.QtCore import Signal
from PySide6.QtWidgets import QVBoxLayout, QPushButton, QLineEdit, QComboBox, QFrame, QLabel


@dataclass
class SimulateRequest:
    patient_id: str | None = None
    drug_name: str | None = None
    dose: str = ""
    half_life: str = ""


class ControlsPanel(QFrame):
    simulateRequested = Signal(SimulateRequest)

    def __init__(self):
        super().__init__()
        self.setFrameShape(QFrame.StyledPanel)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Controls"))

        # --- Selection ---
        layout.addWidget(QLabel("Patient"))
        self.patient = QComboBox()
        layout.addWidget(self.patient)

        layout.addWidget(QLabel("Drug"))
        self.drug = QComboBox()
        layout.addWidget(self.drug)

        # --- Dose model ---
        # Plain text fields: parsing happens once, in tdmengine.dosing
        layout.addWidget(QLabel("Dose model"))
        self.dose = QLineEdit(); self.dose.setPlaceholderText("e.g. 100")
        layout.addWidget(QLabel("Dose"))
        layout.addWidget(self.dose)

        self.half_life = QLineEdit(); self.half_life.setPlaceholderText("e.g. 6")
        layout.addWidget(QLabel("t½ (elimination half-life, h)"))
        layout.addWidget(self.half_life)

        go = QPushButton("Simulate"); layout.addWidget(go)
        go.clicked.connect(self._emit_request)
        layout.addStretch(1)

    def set_patients(self, patients):
        self.patient.blockSignals(True)
        self.patient.clear()
        for p in patients:
            self.patient.addItem(f"{p.name} (Age: {p.age})", p.id)
        self.patient.blockSignals(False)

    def set_drugs(self, drugs: list[str]):
        self.drug.clear()
        self.drug.addItems(drugs)

    def _emit_request(self):
        req = SimulateRequest(
            patient_id=self.patient.currentData(),
            drug_name=self.drug.currentText() or None,
            dose=self.dose.text(),
            half_life=self.half_life.text(),
        )
        self.simulateRequested.emit(req)
