"""Shared pytest fixtures for PomoTimer tests."""

import os
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402

from pomotimer.commands import TimerCommands  # noqa: E402
from pomotimer.settings import PreferencesStore  # noqa: E402
from pomotimer.timer.engine import TimerEngine  # noqa: E402
from pomotimer.timer.status import TimerStatus, TimerType  # noqa: E402

from helpers import FAST_INTERVAL, MANUAL_INTERVAL, RecordingNotifier  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture
def prefs_path(tmp_path):
    """Preferences file location inside the test's temp directory."""
    return tmp_path / "config" / "preferences.json"


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def engine(notifier):
    """TimerEngine idle on a 25-minute work session, ticked by hand."""
    eng = TimerEngine(
        TimerStatus.idle(TimerType.WORK, 25 * 60),
        notifier=notifier,
        interval=MANUAL_INTERVAL,
    )
    yield eng
    eng.shutdown(timeout=1.0)


@pytest.fixture
def commands(prefs_path, notifier):
    """TimerCommands over default preferences, ticked by hand."""
    cmds = TimerCommands(
        PreferencesStore.load(prefs_path),
        notifier=notifier,
        interval=MANUAL_INTERVAL,
    )
    yield cmds
    cmds.shutdown(timeout=1.0)


@pytest.fixture
def fast_commands(prefs_path, notifier):
    """TimerCommands whose background thread really ticks, quickly."""
    cmds = TimerCommands(
        PreferencesStore.load(prefs_path),
        notifier=notifier,
        interval=FAST_INTERVAL,
    )
    yield cmds
    cmds.shutdown(timeout=2.0)
