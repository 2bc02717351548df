# src/tdmviz/app.py
import json
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from .state import AppState
from .ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def load_state(path: str | None) -> AppState:
    """Read a saved AppState (JSON from AppState.to_dict); a fresh state when no path is given."""
    if not path:
        return AppState()
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    state = AppState.from_dict(data)
    logger.info("Loaded %d patients, %d blood tests from %s",
                len(state.patients), len(state.blood_tests), path)
    return state


def main() -> int:
    logging.basicConfig(level=logging.INFO)
    app = QApplication(sys.argv)
    args = app.arguments()[1:]
    window = MainWindow(load_state(args[0] if args else None))
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
