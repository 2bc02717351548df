# src/tdmviz/ui/plots.py
from PySide6.QtWidgets import QWidget, QVBoxLayout
import numpy as np
import pyqtgraph as pg

from tdmengine.config import CONCENTRATION_UNIT
from tdmengine.curve import curve_arrays


class PlotWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        # Main plot area
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setLabel("left", "Concentration", units=CONCENTRATION_UNIT)
        self.plot_widget.setLabel("bottom", "Time", units="h")
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.addLegend()
        layout.addWidget(self.plot_widget)

        self.curves = {}  # store references for updates

    def plot_points(self, points, label: str = "Predicted"):
        """Predicted line plus observed markers for one simulated curve."""
        self.clear()
        if not points:
            return
        t, predicted, observed = curve_arrays(points)
        self.curves[label] = self.plot_widget.plot(t, predicted, pen=pg.mkPen(width=2), name=label)

        mask = ~np.isnan(observed)
        if mask.any():
            self.curves["Observed"] = self.plot_widget.plot(
                t[mask], observed[mask],
                pen=None, symbol="o", symbolSize=8,
                name="Observed",
            )

    def clear(self):
        self.plot_widget.clear()
        self.curves = {}
