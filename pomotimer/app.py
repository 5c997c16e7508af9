"""Main application window for PomoTimer."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QProgressBar, QPushButton, QSystemTrayIcon, QMenu,
)

from .audio.sounds import SoundManager
from .commands import TimerCommands
from .settings import PreferencesStore
from .timer.engine import TICK_INTERVAL
from .timer.events import Notifier, NullNotifier, TrayNotifier
from .timer.status import TimerState, TimerStatus, TimerType
from .ui.settings_dialog import SettingsDialog


_STATUS_MESSAGES: dict[TimerState, str] = {
    TimerState.IDLE: "Ready",
    TimerState.RUNNING: "Running",
    TimerState.PAUSED: "Paused",
    TimerState.COMPLETED: "Completed",
}


class PomoTimerWindow(QMainWindow):
    """Renders the timer status and forwards button presses as commands."""

    def __init__(
        self,
        preferences: PreferencesStore | None = None,
        *,
        interval: float = TICK_INTERVAL,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro Timer")
        self.setMinimumSize(360, 320)

        # ── tray + notifier ───────────────────────────────────────────
        self._tray_icon: QSystemTrayIcon | None = None
        notifier: Notifier = NullNotifier()
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray_icon = QSystemTrayIcon(self.windowIcon(), self)
            self._tray_icon.setToolTip("Pomodoro Timer")
            self._build_tray_menu()
            self._tray_icon.show()
            notifier = TrayNotifier(self._tray_icon, self)

        # ── timer ─────────────────────────────────────────────────────
        self._commands = TimerCommands(
            preferences, notifier=notifier, interval=interval,
        )
        events = self._commands.events
        events.tick.connect(self._on_status)
        events.state_changed.connect(self._on_status)
        events.completed.connect(self._on_completed)

        self._sound_manager = SoundManager(parent=self)

        self._build_ui()
        self._build_menu_bar()
        self._on_status(self._commands.get_timer_status())

    @property
    def commands(self) -> TimerCommands:
        return self._commands

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        central = QWidget()
        root = QVBoxLayout(central)
        root.setContentsMargins(24, 24, 24, 24)
        root.setSpacing(14)

        self._type_label = QLabel()
        self._type_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._type_label.setStyleSheet("font-size: 18px; font-weight: 600;")
        root.addWidget(self._type_label)

        self._time_label = QLabel()
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label.setStyleSheet("font-size: 56px; font-weight: 700;")
        root.addWidget(self._time_label)

        self._progress = QProgressBar()
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        root.addWidget(self._progress)

        self._state_label = QLabel()
        self._state_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._state_label)

        # ── session buttons ──────────────────────────────────────────
        sessions = QHBoxLayout()
        self._work_btn = QPushButton()
        self._work_btn.clicked.connect(self._commands.start_work_timer)
        self._short_btn = QPushButton()
        self._short_btn.clicked.connect(self._commands.start_short_break)
        self._long_btn = QPushButton()
        self._long_btn.clicked.connect(self._commands.start_long_break)
        for btn in (self._work_btn, self._short_btn, self._long_btn):
            sessions.addWidget(btn)
        root.addLayout(sessions)

        # ── control buttons ──────────────────────────────────────────
        controls = QHBoxLayout()
        self._pause_btn = QPushButton("Pause")
        self._pause_btn.clicked.connect(self._toggle_pause)
        self._stop_btn = QPushButton("Stop")
        self._stop_btn.clicked.connect(self._commands.stop_timer)
        settings_btn = QPushButton("Settings")
        settings_btn.clicked.connect(self._open_settings)
        controls.addWidget(self._pause_btn)
        controls.addWidget(self._stop_btn)
        controls.addWidget(settings_btn)
        root.addLayout(controls)

        self.setCentralWidget(central)
        self._apply_preferences()

    def _build_menu_bar(self) -> None:
        app_menu = self.menuBar().addMenu("Pomodoro Timer")

        prefs_action = QAction("Preferences…", self)
        prefs_action.setMenuRole(QAction.MenuRole.PreferencesRole)
        prefs_action.setShortcut(QKeySequence("Ctrl+,"))
        prefs_action.triggered.connect(self._open_settings)
        app_menu.addAction(prefs_action)

        quit_action = QAction("Quit", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)
        app_menu.addAction(quit_action)

    def _build_tray_menu(self) -> None:
        menu = QMenu(self)
        show_action = menu.addAction("Show Pomodoro Timer")
        show_action.triggered.connect(self._show_window)
        menu.addSeparator()
        quit_action = menu.addAction("Quit")
        quit_action.triggered.connect(self.close)
        self._tray_icon.setContextMenu(menu)

    def _show_window(self) -> None:
        self.show()
        self.raise_()
        self.activateWindow()

    # ══════════════════════════════════════════════════════════════════
    #  TIMER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_status(self, status: TimerStatus) -> None:
        self._type_label.setText(status.timer_type.title)
        self._time_label.setText(status.formatted_remaining)
        self._progress.setValue(round(status.progress * 1000))
        self._state_label.setText(_STATUS_MESSAGES[status.state])

        running = status.is_running
        for btn in (self._work_btn, self._short_btn, self._long_btn):
            btn.setEnabled(not running)
        self._pause_btn.setEnabled(status.state in (TimerState.RUNNING, TimerState.PAUSED))
        self._pause_btn.setText("Resume" if status.state is TimerState.PAUSED else "Pause")

        if self._tray_icon is not None:
            self._tray_icon.setToolTip(
                f"Pomodoro Timer — {status.timer_type.title} "
                f"{status.formatted_remaining}"
            )

    def _on_completed(self, timer_type: TimerType) -> None:
        self._sound_manager.play_completion(timer_type)
        # Auto-start may already have moved on; always show the latest.
        self._on_status(self._commands.get_timer_status())

    def _toggle_pause(self) -> None:
        if self._commands.get_timer_status().state is TimerState.PAUSED:
            self._commands.resume_timer()
        else:
            self._commands.pause_timer()

    def _open_settings(self) -> None:
        dialog = SettingsDialog(self._commands, self)
        if dialog.exec():
            self._apply_preferences()

    def _apply_preferences(self) -> None:
        prefs = self._commands.get_preferences()
        self._sound_manager.set_enabled(prefs.notification_sound)
        self._work_btn.setText(f"Work ({prefs.work_duration_minutes}m)")
        self._short_btn.setText(f"Short Break ({prefs.short_break_duration_minutes}m)")
        self._long_btn.setText(f"Long Break ({prefs.long_break_duration_minutes}m)")

    # ══════════════════════════════════════════════════════════════════
    #  SHUTDOWN
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:
        self._commands.shutdown()
        if self._tray_icon is not None:
            self._tray_icon.hide()
        super().closeEvent(event)
        QApplication.instance().quit()
