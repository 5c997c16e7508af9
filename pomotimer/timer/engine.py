"""Tick scheduler: the background countdown for PomoTimer.

Transitions
-----------
any     → RUNNING    (start)   new duration, fresh ticker thread
RUNNING → PAUSED     (pause)   ticker invalidated, remaining kept
PAUSED  → RUNNING    (resume)  fresh ticker thread
any     → IDLE       (stop)    duration re-seeded, ticker invalidated
RUNNING → COMPLETED  (tick)    remaining reached 0

Each run gets one daemon thread.  It waits ``interval`` seconds, then
ticks: decrement and emit ``tick``, or mark COMPLETED, emit ``completed``
and request a notification.  The thread carries the generation that was
current when it was spawned and every mutation is checked against it
under the store lock, so a thread left over from an earlier run can never
touch the status again.  Invalidation also sets the run's wake-up event
so stale threads exit promptly instead of finishing their wait.

Pause and resume
----------------
Pausing ends the current thread; resuming spawns a new one.  A resumed
timer therefore always has exactly one thread advancing it.
"""

from __future__ import annotations

import logging
import threading
import time

from .events import (
    COMPLETED_EVENT,
    NOTIFICATION_TITLE,
    TICK_EVENT,
    Notifier,
    NullNotifier,
    TimerEvents,
    completion_message,
)
from .status import StatusStore, TimerState, TimerStatus, TimerType

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0  # seconds


class TimerEngine:
    """Owns the status store and the ticker thread for the single timer.

    Parameters
    ----------
    initial : TimerStatus
        Status to start from, normally IDLE with the work duration.
    events : TimerEvents, optional
        Where ``tick`` and ``completed`` are emitted.
    notifier : Notifier, optional
        Receives one request per natural completion.
    interval : float
        Seconds between ticks.  Tests shorten it.
    """

    def __init__(
        self,
        initial: TimerStatus,
        *,
        events: TimerEvents | None = None,
        notifier: Notifier | None = None,
        interval: float = TICK_INTERVAL,
    ) -> None:
        self._store = StatusStore(initial)
        self.events = events if events is not None else TimerEvents()
        self._notifier = notifier if notifier is not None else NullNotifier()
        self._interval = interval

        # Guards the thread bookkeeping below, never the status.
        self._thread_lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._wake: threading.Event | None = None
        self._started_at: float | None = None

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def status(self) -> TimerStatus:
        return self._store.get()

    @property
    def generation(self) -> int:
        return self._store.generation

    @property
    def started_at(self) -> float | None:
        """``time.monotonic()`` of the last start, or None once stopped."""
        return self._started_at

    @property
    def is_ticking(self) -> bool:
        with self._thread_lock:
            return self._thread is not None and self._thread.is_alive()

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, timer_type: TimerType, total_seconds: int) -> None:
        """Start a fresh countdown from any state."""
        status = TimerStatus(
            TimerState.RUNNING, timer_type, total_seconds, total_seconds
        )
        generation = self._store.replace(status, bump=True)
        self._started_at = time.monotonic()
        logger.info(
            "Started %s timer for %d seconds", timer_type.value, total_seconds
        )
        self._spawn(generation)
        self.events.state_changed.emit(status)

    def pause(self) -> None:
        """RUNNING → PAUSED.  No-op from any other state."""
        result = self._store.update(
            lambda s: (
                s.with_changes(state=TimerState.PAUSED)
                if s.state is TimerState.RUNNING else None
            ),
            bump=True,
        )
        if result is None:
            logger.debug("pause ignored: timer is not running")
            return
        status, _ = result
        self._invalidate()
        logger.info("Paused with %d seconds remaining", status.remaining_seconds)
        self.events.state_changed.emit(status)

    def resume(self) -> None:
        """PAUSED → RUNNING.  No-op from any other state."""
        result = self._store.update(
            lambda s: (
                s.with_changes(state=TimerState.RUNNING)
                if s.state is TimerState.PAUSED else None
            ),
            bump=True,
        )
        if result is None:
            logger.debug("resume ignored: timer is not paused")
            return
        status, generation = result
        logger.info("Resumed with %d seconds remaining", status.remaining_seconds)
        self._spawn(generation)
        self.events.state_changed.emit(status)

    def stop(self, total_seconds: int) -> None:
        """Return to IDLE from any state with a freshly seeded duration."""
        result = self._store.update(
            lambda s: TimerStatus.idle(s.timer_type, total_seconds),
            bump=True,
        )
        status, _ = result
        self._invalidate()
        self._started_at = None
        logger.info("Stopped; %s reset to %d seconds",
                    status.timer_type.value, total_seconds)
        self.events.state_changed.emit(status)

    def reset_duration(self, total_seconds: int) -> bool:
        """Re-seed the duration while IDLE.  Returns False otherwise."""
        result = self._store.update(
            lambda s: (
                TimerStatus.idle(s.timer_type, total_seconds)
                if s.state is TimerState.IDLE else None
            ),
        )
        if result is None:
            return False
        self.events.state_changed.emit(result[0])
        return True

    def shutdown(self, timeout: float | None = None) -> None:
        """Invalidate any ticker and wait for its thread to exit."""
        self._store.update(lambda s: s, bump=True)
        self._invalidate()
        self.wait_idle(timeout)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Join the current ticker thread.  True if no thread is left."""
        with self._thread_lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: ticker mechanics
    # ══════════════════════════════════════════════════════════════════

    def _spawn(self, generation: int) -> None:
        wake = threading.Event()
        thread = threading.Thread(
            target=self._run,
            args=(generation, wake),
            name=f"pomotimer-ticker-{generation}",
            daemon=True,
        )
        with self._thread_lock:
            if self._wake is not None:
                self._wake.set()
            self._wake = wake
            self._thread = thread
        thread.start()

    def _invalidate(self) -> None:
        with self._thread_lock:
            if self._wake is not None:
                self._wake.set()
                self._wake = None

    def _run(self, generation: int, wake: threading.Event) -> None:
        while True:
            # Cooperative sleep; set() only ever comes from invalidation.
            if wake.wait(self._interval):
                logger.debug("Ticker %d woken for shutdown", generation)
                return
            if not self._tick(generation):
                return

    def _tick(self, generation: int) -> bool:
        """Advance one second.  Returns True while the run should go on."""
        status = self._store.update_if_current(generation, _advance)
        if status is None:
            logger.debug("Ticker %d is stale or not running; exiting", generation)
            return False

        if status.state is TimerState.COMPLETED:
            self._complete(status.timer_type)
            return False

        logger.debug("%s %s", TICK_EVENT, status.to_dict())
        self.events.tick.emit(status)
        return True

    def _complete(self, timer_type: TimerType) -> None:
        logger.info("%s: %s completed", COMPLETED_EVENT, timer_type.label)
        self._notifier.notify(NOTIFICATION_TITLE, completion_message(timer_type))
        self.events.completed.emit(timer_type)


def _advance(status: TimerStatus) -> TimerStatus | None:
    if status.state is not TimerState.RUNNING:
        return None
    if status.remaining_seconds > 0:
        return status.with_changes(remaining_seconds=status.remaining_seconds - 1)
    return status.with_changes(state=TimerState.COMPLETED)
