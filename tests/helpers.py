"""Shared test helpers for PomoTimer."""

from PyQt6.QtCore import QCoreApplication

from pomotimer.timer.engine import TimerEngine
from pomotimer.timer.events import Notifier

# Long enough that the background thread never ticks on its own; tests
# drive ticks by hand with ``run_ticks``.
MANUAL_INTERVAL = 3600.0
FAST_INTERVAL = 0.005


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class RecordingNotifier(Notifier):
    """Notifier that remembers every (title, body) it was asked to show."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.messages.append((title, body))


def flush_events() -> None:
    """Deliver signals queued from ticker threads to this thread."""
    QCoreApplication.sendPostedEvents()
    QCoreApplication.processEvents()


def run_ticks(engine: TimerEngine, count: int) -> int:
    """Drive *count* ticks by hand for the current run.

    Returns how many of them asked the run to continue.
    """
    generation = engine.generation
    alive = 0
    for _ in range(count):
        if engine._tick(generation):
            alive += 1
    return alive


def complete_session(engine: TimerEngine) -> None:
    """Tick the current run down to zero and through completion."""
    generation = engine.generation
    while engine._tick(generation):
        pass
