"""Event boundary between the timer core and whoever displays it.

``TimerEvents`` carries the per-second and per-completion signals; the
desktop notification is a second, separate sink behind ``Notifier``.
Signals are emitted from the ticker thread.  Receivers connected from the
GUI thread, plain callables included, are invoked there through its event
loop; ticks driven on the GUI thread itself are delivered directly.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QSystemTrayIcon

from .status import TimerType

logger = logging.getLogger(__name__)

TICK_EVENT = "timer-tick"
COMPLETED_EVENT = "timer-completed"

NOTIFICATION_TITLE = "Pomodoro Timer"


def completion_message(timer_type: TimerType) -> str:
    return f"{timer_type.label} completed!"


class TimerEvents(QObject):
    """Signals emitted by the timer.

    Signals
    -------
    tick(status: TimerStatus)
        Once per elapsed second while running, with the full snapshot.
    completed(timer_type: TimerType)
        Once per run, on natural completion only.
    state_changed(status: TimerStatus)
        After every command-driven transition (start, pause, resume,
        stop, duration re-seed).
    """

    tick = pyqtSignal(object)
    completed = pyqtSignal(object)
    state_changed = pyqtSignal(object)


# ── notifiers ─────────────────────────────────────────────────────────────


class Notifier:
    """Delivers a user-visible notification."""

    def notify(self, title: str, body: str) -> None:
        raise NotImplementedError


class NullNotifier(Notifier):
    """Headless notifier: only logs."""

    def notify(self, title: str, body: str) -> None:
        logger.info("Notification: %s: %s", title, body)


class TrayNotifier(QObject, Notifier):
    """Show notifications as system tray banners.

    ``notify`` may be called from the ticker thread; the request is
    re-emitted through a signal so the tray icon is only touched on the
    thread that owns it.
    """

    _requested = pyqtSignal(str, str)

    def __init__(
        self,
        tray_icon: QSystemTrayIcon,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._tray_icon = tray_icon
        self._requested.connect(self._show)

    def notify(self, title: str, body: str) -> None:
        self._requested.emit(title, body)

    def _show(self, title: str, body: str) -> None:
        self._tray_icon.showMessage(title, body)
