"""Timer package."""

from .engine import TimerEngine, TICK_INTERVAL
from .events import (
    TimerEvents,
    Notifier,
    NullNotifier,
    TrayNotifier,
    NOTIFICATION_TITLE,
    TICK_EVENT,
    COMPLETED_EVENT,
    completion_message,
)
from .status import (
    TimerState,
    TimerType,
    TimerStatus,
    StatusStore,
    format_seconds,
)

__all__ = [
    "TimerEngine",
    "TICK_INTERVAL",
    "TimerEvents",
    "Notifier",
    "NullNotifier",
    "TrayNotifier",
    "NOTIFICATION_TITLE",
    "TICK_EVENT",
    "COMPLETED_EVENT",
    "completion_message",
    "TimerState",
    "TimerType",
    "TimerStatus",
    "StatusStore",
    "format_seconds",
]
