"""Timer status value types and the lock-guarded store that owns them.

States
------
IDLE       Not running, remaining time seeded from preferences.
RUNNING    Counting down once per second.
PAUSED     Frozen; ``resume`` re-arms the countdown.
COMPLETED  Reached zero naturally.  Remaining is always 0.

The store also owns the generation counter.  Every command that starts,
stops, pauses or resumes the countdown bumps it, and a ticker thread may
only mutate the status while the generation it captured is still current.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable


# ── enums ─────────────────────────────────────────────────────────────────


class TimerState(Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"
    COMPLETED = "Completed"


class TimerType(Enum):
    WORK = "Work"
    SHORT_BREAK = "ShortBreak"
    LONG_BREAK = "LongBreak"

    @property
    def label(self) -> str:
        """Name used in completion notifications."""
        return _LABELS[self]

    @property
    def title(self) -> str:
        """Heading shown above the countdown."""
        return _TITLES[self]


_LABELS: dict[TimerType, str] = {
    TimerType.WORK: "Work session",
    TimerType.SHORT_BREAK: "Short break",
    TimerType.LONG_BREAK: "Long break",
}

_TITLES: dict[TimerType, str] = {
    TimerType.WORK: "Work Session",
    TimerType.SHORT_BREAK: "Short Break",
    TimerType.LONG_BREAK: "Long Break",
}


# ── status snapshot ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerStatus:
    state: TimerState
    timer_type: TimerType
    remaining_seconds: int
    total_seconds: int

    def __post_init__(self) -> None:
        if self.remaining_seconds < 0 or self.total_seconds < 0:
            raise ValueError(f"negative duration in {self!r}")
        if self.remaining_seconds > self.total_seconds:
            raise ValueError(
                f"remaining_seconds ({self.remaining_seconds}) exceeds "
                f"total_seconds ({self.total_seconds})"
            )
        if self.state is TimerState.COMPLETED and self.remaining_seconds != 0:
            raise ValueError("a completed timer must have 0 seconds remaining")

    @classmethod
    def idle(cls, timer_type: TimerType, total_seconds: int) -> TimerStatus:
        return cls(TimerState.IDLE, timer_type, total_seconds, total_seconds)

    @property
    def is_running(self) -> bool:
        return self.state is TimerState.RUNNING

    @property
    def progress(self) -> float:
        """0.0 → 1.0 progress through the current session."""
        if self.total_seconds <= 0:
            return 0.0
        elapsed = self.total_seconds - self.remaining_seconds
        return elapsed / self.total_seconds

    @property
    def formatted_remaining(self) -> str:
        return format_seconds(self.remaining_seconds)

    def with_changes(self, **changes: Any) -> TimerStatus:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Wire form carried by tick events."""
        return {
            "state": self.state.value,
            "timer_type": self.timer_type.value,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
        }


def format_seconds(seconds: int) -> str:
    """Format seconds as ``MM:SS``."""
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


# ── store ─────────────────────────────────────────────────────────────────


class StatusStore:
    """Holds the single authoritative ``TimerStatus``.

    All reads and writes go through one lock.  ``TimerStatus`` is frozen,
    so ``get`` hands out the stored value itself as the snapshot.
    """

    def __init__(self, status: TimerStatus) -> None:
        self._lock = threading.Lock()
        self._status = status
        self._generation = 0

    def get(self) -> TimerStatus:
        with self._lock:
            return self._status

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def replace(self, status: TimerStatus, *, bump: bool = False) -> int:
        """Swap in *status*.  Returns the generation now in force."""
        with self._lock:
            self._status = status
            if bump:
                self._generation += 1
            return self._generation

    def update(
        self,
        fn: Callable[[TimerStatus], TimerStatus | None],
        *,
        bump: bool = False,
    ) -> tuple[TimerStatus, int] | None:
        """Apply *fn* to the current status atomically.

        *fn* returns the new status, or ``None`` to leave everything
        untouched (the generation is not bumped either).  Returns the
        stored status and generation, or ``None`` when nothing changed.
        """
        with self._lock:
            new_status = fn(self._status)
            if new_status is None:
                return None
            self._status = new_status
            if bump:
                self._generation += 1
            return self._status, self._generation

    def update_if_current(
        self,
        generation: int,
        fn: Callable[[TimerStatus], TimerStatus | None],
    ) -> TimerStatus | None:
        """Like ``update`` but only while *generation* is current.

        Returns ``None`` when the caller is stale or *fn* declined.
        """
        with self._lock:
            if generation != self._generation:
                return None
            new_status = fn(self._status)
            if new_status is None:
                return None
            self._status = new_status
            return self._status
