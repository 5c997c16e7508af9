"""Command surface used by the UI layer.

Every command returns as soon as the stores are updated; none of them
waits for the ticker thread.  Durations are always read from the
preferences current at the time of the call.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .settings import PreferencesStore, UserPreferences
from .timer.engine import TICK_INTERVAL, TimerEngine
from .timer.events import Notifier, TimerEvents
from .timer.status import TimerStatus, TimerType

logger = logging.getLogger(__name__)

ROUNDS_PER_CYCLE = 4  # work sessions before a long break


class TimerCommands:
    """Synchronous façade over the timer engine and the preferences store.

    Parameters
    ----------
    preferences : PreferencesStore, optional
        Defaults to the store loaded from the per-user config location.
    events, notifier, interval
        Passed through to ``TimerEngine``.
    """

    def __init__(
        self,
        preferences: PreferencesStore | None = None,
        *,
        events: TimerEvents | None = None,
        notifier: Notifier | None = None,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self._preferences = preferences if preferences is not None else PreferencesStore.load()
        prefs = self._preferences.get()
        self._engine = TimerEngine(
            TimerStatus.idle(TimerType.WORK, prefs.duration_seconds(TimerType.WORK)),
            events=events,
            notifier=notifier,
            interval=interval,
        )
        self._completed_work_sessions = 0
        self._engine.events.completed.connect(self._on_completed)

    @classmethod
    def from_path(cls, path: Path, **kwargs) -> TimerCommands:
        return cls(PreferencesStore.load(path), **kwargs)

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def events(self) -> TimerEvents:
        return self._engine.events

    @property
    def completed_work_sessions(self) -> int:
        return self._completed_work_sessions

    # ══════════════════════════════════════════════════════════════════
    #  TIMER COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def get_timer_status(self) -> TimerStatus:
        return self._engine.status

    def start_work_timer(self) -> None:
        self._start(TimerType.WORK)

    def start_short_break(self) -> None:
        self._start(TimerType.SHORT_BREAK)

    def start_long_break(self) -> None:
        self._start(TimerType.LONG_BREAK)

    def pause_timer(self) -> None:
        self._engine.pause()

    def resume_timer(self) -> None:
        self._engine.resume()

    def stop_timer(self) -> None:
        timer_type = self._engine.status.timer_type
        self._engine.stop(self._preferences.get().duration_seconds(timer_type))

    # Short names for callers that don't mirror the command surface.
    get_status = get_timer_status
    start_work = start_work_timer
    pause = pause_timer
    resume = resume_timer
    stop = stop_timer

    # ══════════════════════════════════════════════════════════════════
    #  PREFERENCE COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def get_preferences(self) -> UserPreferences:
        return self._preferences.get()

    def update_preferences(self, prefs: UserPreferences) -> None:
        """Apply *prefs* and persist them.

        While IDLE the countdown is re-seeded from the new duration for
        the current timer type.  The in-memory change stays applied even
        when saving fails; the failure is raised as ``PreferencesError``.
        """
        self._preferences.set(prefs)
        timer_type = self._engine.status.timer_type
        if self._engine.reset_duration(prefs.duration_seconds(timer_type)):
            logger.info("Re-seeded idle %s timer from new preferences",
                        timer_type.value)
        self._preferences.save()

    def reset_preferences(self) -> None:
        """Restore and persist the default preferences."""
        self.update_preferences(UserPreferences())

    def shutdown(self, timeout: float | None = 2.0) -> None:
        self._engine.shutdown(timeout)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _start(self, timer_type: TimerType) -> None:
        self._engine.start(
            timer_type, self._preferences.get().duration_seconds(timer_type)
        )

    def _on_completed(self, timer_type: TimerType) -> None:
        """Auto-start the next session when the preferences ask for it.

        Runs on the thread that created this object, through its Qt event
        loop, when the completion came from the ticker thread.
        """
        prefs = self._preferences.get()
        if timer_type is TimerType.WORK:
            self._completed_work_sessions += 1
            if not prefs.auto_start_breaks:
                return
            if self._completed_work_sessions % ROUNDS_PER_CYCLE == 0:
                self._start(TimerType.LONG_BREAK)
            else:
                self._start(TimerType.SHORT_BREAK)
        elif prefs.auto_start_work:
            self._start(TimerType.WORK)

    def __repr__(self) -> str:
        status = self._engine.status
        return (
            f"<TimerCommands state={status.state.value} "
            f"type={status.timer_type.value} "
            f"remaining={status.remaining_seconds}>"
        )
