"""Settings dialog for PomoTimer.

A modal dialog for timer durations, auto-start options and the
notification sound.  Nothing is applied until the user presses Save;
"Reset to defaults" only refills the form.
"""

from __future__ import annotations

import logging

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QCheckBox, QPushButton,
    QFrame, QWidget, QMessageBox,
)

from ..commands import TimerCommands
from ..settings import PreferencesError, UserPreferences

logger = logging.getLogger(__name__)


class SettingsDialog(QDialog):
    """Modal dialog editing ``UserPreferences`` through the command surface."""

    def __init__(
        self,
        commands: TimerCommands,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._commands = commands

        self._build_ui()
        self._populate(commands.get_preferences())

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        # ── Timer durations ──────────────────────────────────────────
        root.addWidget(self._section_label("Timer Durations"))
        timer_form = QFormLayout()
        timer_form.setHorizontalSpacing(20)
        timer_form.setVerticalSpacing(10)

        self._work_spin = self._minutes_spin(60)
        timer_form.addRow("Work session:", self._work_spin)
        self._short_spin = self._minutes_spin(30)
        timer_form.addRow("Short break:", self._short_spin)
        self._long_spin = self._minutes_spin(60)
        timer_form.addRow("Long break:", self._long_spin)
        root.addLayout(timer_form)

        root.addWidget(self._separator())

        # ── Auto-start ───────────────────────────────────────────────
        root.addWidget(self._section_label("Auto-Start Options"))
        self._auto_breaks_cb = QCheckBox("Automatically start breaks")
        self._auto_work_cb = QCheckBox("Automatically start work sessions")
        root.addWidget(self._auto_breaks_cb)
        root.addWidget(self._auto_work_cb)

        root.addWidget(self._separator())

        # ── Notifications ────────────────────────────────────────────
        root.addWidget(self._section_label("Notifications"))
        self._sound_cb = QCheckBox("Enable notification sounds")
        root.addWidget(self._sound_cb)

        # ── buttons ──────────────────────────────────────────────────
        root.addStretch()
        btn_row = QHBoxLayout()
        reset_btn = QPushButton("Reset to Defaults")
        reset_btn.clicked.connect(self._on_reset)
        btn_row.addWidget(reset_btn)
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)
        self._save_btn = QPushButton("Save")
        self._save_btn.setDefault(True)
        self._save_btn.clicked.connect(self._on_save)
        btn_row.addWidget(self._save_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _minutes_spin(maximum: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(1, maximum)
        spin.setSuffix(" min")
        return spin

    @staticmethod
    def _section_label(text: str) -> QLabel:
        lbl = QLabel(text)
        lbl.setStyleSheet("font-size: 15px; font-weight: 700; margin-top: 4px;")
        return lbl

    @staticmethod
    def _separator() -> QFrame:
        line = QFrame()
        line.setFrameShape(QFrame.Shape.HLine)
        line.setFixedHeight(1)
        return line

    # ══════════════════════════════════════════════════════════════════
    #  FORM ↔ PREFERENCES
    # ══════════════════════════════════════════════════════════════════

    def _populate(self, prefs: UserPreferences) -> None:
        for spin, minutes in (
            (self._work_spin, prefs.work_duration_minutes),
            (self._short_spin, prefs.short_break_duration_minutes),
            (self._long_spin, prefs.long_break_duration_minutes),
        ):
            # Durations edited by hand outside the usual range are kept as-is.
            if not spin.minimum() <= minutes <= spin.maximum():
                spin.setRange(
                    min(spin.minimum(), minutes), max(spin.maximum(), minutes),
                )
            spin.setValue(minutes)
        self._auto_breaks_cb.setChecked(prefs.auto_start_breaks)
        self._auto_work_cb.setChecked(prefs.auto_start_work)
        self._sound_cb.setChecked(prefs.notification_sound)

    def preferences(self) -> UserPreferences:
        """Preferences as currently entered in the form."""
        return UserPreferences(
            work_duration_minutes=self._work_spin.value(),
            short_break_duration_minutes=self._short_spin.value(),
            long_break_duration_minutes=self._long_spin.value(),
            auto_start_breaks=self._auto_breaks_cb.isChecked(),
            auto_start_work=self._auto_work_cb.isChecked(),
            notification_sound=self._sound_cb.isChecked(),
        )

    # ══════════════════════════════════════════════════════════════════
    #  HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _on_reset(self) -> None:
        self._populate(UserPreferences())

    def _on_save(self) -> None:
        try:
            self._commands.update_preferences(self.preferences())
        except PreferencesError as e:
            # Already applied in memory; only the file is behind.
            logger.error("%s", e)
            QMessageBox.warning(
                self,
                "Settings not saved",
                f"Your changes are active but could not be saved:\n{e}",
            )
        self.accept()
