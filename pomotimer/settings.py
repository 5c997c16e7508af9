"""User preferences with JSON persistence.

Preferences are stored at:
    ~/Library/Application Support/PomoTimer/preferences.json   (macOS)
    %APPDATA%/PomoTimer/preferences.json                       (Windows)
    $XDG_CONFIG_HOME/pomotimer/preferences.json                (elsewhere)

Loading is fail-open: a missing or unreadable file gives the defaults.
Saving reports failures to the caller as ``PreferencesError``.

Usage::

    store = PreferencesStore.load()
    prefs = store.get()
    store.set(replace(prefs, work_duration_minutes=50))
    store.save()
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any

from .timer.status import TimerType

logger = logging.getLogger(__name__)


def _default_config_dir() -> Path:
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "PomoTimer"
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        return (Path(base) if base else Path.home()) / "PomoTimer"
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / "pomotimer"


CONFIG_DIR = _default_config_dir()
PREFERENCES_PATH = CONFIG_DIR / "preferences.json"


class PreferencesError(Exception):
    """Raised when preferences cannot be written to disk."""


@dataclass(frozen=True)
class UserPreferences:
    """All user-configurable preferences."""

    # ── timer ─────────────────────────────────────────────────────────
    work_duration_minutes: int = 25
    short_break_duration_minutes: int = 5
    long_break_duration_minutes: int = 15
    auto_start_breaks: bool = False
    auto_start_work: bool = False

    # ── notifications ─────────────────────────────────────────────────
    notification_sound: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type == "bool":
                if not isinstance(value, bool):
                    raise ValueError(f"{f.name} must be a boolean, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(
                    f"{f.name} must be a non-negative integer, got {value!r}"
                )

    def duration_minutes(self, timer_type: TimerType) -> int:
        if timer_type is TimerType.WORK:
            return self.work_duration_minutes
        if timer_type is TimerType.SHORT_BREAK:
            return self.short_break_duration_minutes
        if timer_type is TimerType.LONG_BREAK:
            return self.long_break_duration_minutes
        raise ValueError(f"unknown timer type: {timer_type!r}")

    def duration_seconds(self, timer_type: TimerType) -> int:
        return self.duration_minutes(timer_type) * 60

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UserPreferences:
        """Build from a decoded JSON object.

        Unknown keys are ignored and missing keys take their defaults.
        Values of the wrong type raise ``ValueError``.
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_preferences(path: Path | None = None) -> UserPreferences:
    """Load preferences from disk, falling back to defaults."""
    path = path or PREFERENCES_PATH
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        logger.debug("No preferences file at %s, using defaults", path)
        return UserPreferences()
    except OSError as e:
        logger.warning("Could not read preferences from %s: %s", path, e)
        return UserPreferences()

    try:
        return UserPreferences.from_dict(json.loads(raw.decode("utf-8")))
    except (ValueError, RecursionError) as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        logger.warning("Ignoring invalid preferences file %s: %s", path, e)
        return UserPreferences()


def save_preferences(prefs: UserPreferences, path: Path | None = None) -> None:
    """Write preferences to disk as JSON.

    The file is written next to its destination and renamed over it, so a
    crash mid-write leaves the previous file intact.
    """
    path = path or PREFERENCES_PATH
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(
            json.dumps(prefs.to_dict(), indent=2) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp_path, path)
    except OSError as e:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove %s", tmp_path)
        raise PreferencesError(f"Failed to save preferences to {path}: {e}") from e
    logger.info("Saved preferences to %s", path)


class PreferencesStore:
    """The single owned copy of ``UserPreferences``, guarded by a lock."""

    def __init__(
        self,
        prefs: UserPreferences | None = None,
        *,
        path: Path | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._prefs = prefs if prefs is not None else UserPreferences()
        self._path = path or PREFERENCES_PATH

    @classmethod
    def load(cls, path: Path | None = None) -> PreferencesStore:
        path = path or PREFERENCES_PATH
        return cls(load_preferences(path), path=path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> UserPreferences:
        with self._lock:
            return self._prefs

    def set(self, prefs: UserPreferences) -> None:
        with self._lock:
            self._prefs = prefs

    def save(self) -> None:
        """Persist the current preferences.  Raises ``PreferencesError``."""
        save_preferences(self.get(), self._path)
