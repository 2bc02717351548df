# src/tdmviz/ui/main_window.py
from PySide6.QtWidgets import QMainWindow, QWidget, QHBoxLayout, QStatusBar

from tdmengine.config import AUC_UNIT, CONCENTRATION_UNIT
from ..state import AppState
from .controls import ControlsPanel, SimulateRequest
from .plots import PlotWidget


class MainWindow(QMainWindow):
    def __init__(self, state: AppState | None = None):
        super().__init__()
        self.setWindowTitle("TDM PK Simulation")
        self.resize(1100, 680)
        self.state = state if state is not None else AppState()

        central = QWidget(self); self.setCentralWidget(central)
        root = QHBoxLayout(central)

        self.controls = ControlsPanel()
        self.plot = PlotWidget()
        root.addWidget(self.controls, 0)
        root.addWidget(self.plot, 1)

        self.status = QStatusBar(); self.setStatusBar(self.status)

        # wire events
        self.controls.patient.currentIndexChanged.connect(self._on_patient_changed)
        self.controls.simulateRequested.connect(self.on_simulate)

        self.controls.set_patients(self.state.patients)
        self._on_patient_changed()

    def _on_patient_changed(self, *_):
        patient_id = self.controls.patient.currentData()
        self.state.select_patient(patient_id)
        self.controls.set_drugs(self.state.available_drugs())

    def on_simulate(self, req: SimulateRequest):
        try:
            self.state.select_patient(req.patient_id)
            self.state.select_drug(req.drug_name)
            self.state.set_simulation_params(dose=req.dose, half_life=req.half_life)

            points = self.state.curve()
            if not points:
                self.plot.clear()
                self.status.showMessage("Enter a dose and half-life to simulate", 5000)
                return
            self.plot.plot_points(points, label=req.drug_name or "Predicted")

            params = self.state.parameters()
            if params is None:
                self.status.showMessage("No parameters available", 5000)
                return
            d = params.as_display()
            msg = (f"t½ {d['half_life_h']} h | k {d['elimination_rate']} /h | "
                   f"AUC {d['auc']} {AUC_UNIT} | Cmax {d['max_concentration']} {CONCENTRATION_UNIT} "
                   f"at {d['time_to_max_h']} h")
            self.status.showMessage(msg)
        except (KeyError, ValueError) as e:
            self.status.showMessage(f"Error: {e}", 8000)
