"""Allow running PomoTimer as a module: python -m pomotimer."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import PomoTimerWindow
from .settings import PreferencesStore


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("PomoTimer")
    app.setOrganizationName("PomoTimer")
    app.setQuitOnLastWindowClosed(False)

    window = PomoTimerWindow(PreferencesStore.load())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
