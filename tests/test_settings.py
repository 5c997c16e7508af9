"""Tests for UserPreferences and their JSON persistence."""

from __future__ import annotations

import json
import os

import pytest

from pomotimer.settings import (
    PreferencesError,
    PreferencesStore,
    UserPreferences,
    load_preferences,
    save_preferences,
)
from pomotimer.timer.status import TimerType


# ═══════════════════════════════════════════════════════════════════════
#  DEFAULTS / VALIDATION
# ═══════════════════════════════════════════════════════════════════════


class TestPreferencesDefaults:
    def test_durations(self):
        p = UserPreferences()
        assert p.work_duration_minutes == 25
        assert p.short_break_duration_minutes == 5
        assert p.long_break_duration_minutes == 15

    def test_flags(self):
        p = UserPreferences()
        assert p.auto_start_breaks is False
        assert p.auto_start_work is False
        assert p.notification_sound is True

    def test_duration_seconds_per_type(self):
        p = UserPreferences(work_duration_minutes=50)
        assert p.duration_seconds(TimerType.WORK) == 3000
        assert p.duration_seconds(TimerType.SHORT_BREAK) == 300
        assert p.duration_seconds(TimerType.LONG_BREAK) == 900


class TestPreferencesValidation:
    @pytest.mark.parametrize("value", [-1, "25", 2.5, True, None])
    def test_bad_duration_rejected(self, value):
        with pytest.raises(ValueError):
            UserPreferences(work_duration_minutes=value)

    @pytest.mark.parametrize("value", [0, 1, "yes", None])
    def test_bad_flag_rejected(self, value):
        with pytest.raises(ValueError):
            UserPreferences(auto_start_work=value)

    def test_zero_minutes_allowed(self):
        assert UserPreferences(short_break_duration_minutes=0).duration_seconds(
            TimerType.SHORT_BREAK) == 0

    def test_from_dict_ignores_unknown_keys(self):
        p = UserPreferences.from_dict({"work_duration_minutes": 30, "theme": "dark"})
        assert p == UserPreferences(work_duration_minutes=30)

    def test_from_dict_fills_missing_keys(self):
        p = UserPreferences.from_dict({"notification_sound": False})
        assert p == UserPreferences(notification_sound=False)

    def test_from_dict_rejects_non_objects(self):
        with pytest.raises(ValueError):
            UserPreferences.from_dict([25, 5, 15])


# ═══════════════════════════════════════════════════════════════════════
#  PERSISTENCE
# ═══════════════════════════════════════════════════════════════════════


class TestPreferencesPersistence:
    def test_round_trip(self, prefs_path):
        original = UserPreferences(
            work_duration_minutes=50,
            short_break_duration_minutes=10,
            long_break_duration_minutes=30,
            auto_start_breaks=True,
            auto_start_work=True,
            notification_sound=False,
        )
        save_preferences(original, prefs_path)
        assert load_preferences(prefs_path) == original

    def test_defaults_round_trip(self, prefs_path):
        save_preferences(UserPreferences(), prefs_path)
        assert load_preferences(prefs_path) == UserPreferences()

    def test_file_is_readable_json(self, prefs_path):
        save_preferences(UserPreferences(), prefs_path)
        data = json.loads(prefs_path.read_text(encoding="utf-8"))
        assert data == {
            "work_duration_minutes": 25,
            "short_break_duration_minutes": 5,
            "long_break_duration_minutes": 15,
            "auto_start_breaks": False,
            "auto_start_work": False,
            "notification_sound": True,
        }
        assert prefs_path.read_text(encoding="utf-8").endswith("}\n")

    def test_save_creates_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "preferences.json"
        save_preferences(UserPreferences(), path)
        assert path.exists()

    def test_save_leaves_no_temp_file(self, prefs_path):
        save_preferences(UserPreferences(), prefs_path)
        assert os.listdir(prefs_path.parent) == ["preferences.json"]

    def test_save_failure_raises(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(PreferencesError):
            save_preferences(UserPreferences(), blocker / "preferences.json")

    def test_missing_file_returns_defaults(self, prefs_path):
        assert load_preferences(prefs_path) == UserPreferences()

    def test_invalid_json_returns_defaults(self, prefs_path):
        prefs_path.parent.mkdir(parents=True)
        prefs_path.write_text("NOT VALID JSON", encoding="utf-8")
        assert load_preferences(prefs_path) == UserPreferences()

    def test_wrong_types_return_defaults(self, prefs_path):
        prefs_path.parent.mkdir(parents=True)
        prefs_path.write_text(
            json.dumps({"work_duration_minutes": "lots"}), encoding="utf-8",
        )
        assert load_preferences(prefs_path) == UserPreferences()

    def test_directory_in_place_of_file_returns_defaults(self, prefs_path):
        prefs_path.mkdir(parents=True)
        assert load_preferences(prefs_path) == UserPreferences()

    def test_undecodable_bytes_return_defaults(self, prefs_path):
        prefs_path.parent.mkdir(parents=True)
        prefs_path.write_bytes(b"\x80\x81\x82")
        assert load_preferences(prefs_path) == UserPreferences()
        assert PreferencesStore.load(prefs_path).get() == UserPreferences()

    def test_deeply_nested_json_returns_defaults(self, prefs_path):
        prefs_path.parent.mkdir(parents=True)
        prefs_path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        assert load_preferences(prefs_path) == UserPreferences()

    def test_failed_replace_removes_temp_file(self, prefs_path):
        # A non-empty directory at the destination makes the rename fail
        # after the temp file was written.
        prefs_path.mkdir(parents=True)
        (prefs_path / "keep").write_text("", encoding="utf-8")
        with pytest.raises(PreferencesError):
            save_preferences(UserPreferences(), prefs_path)
        assert sorted(os.listdir(prefs_path.parent)) == ["preferences.json"]


# ═══════════════════════════════════════════════════════════════════════
#  STORE
# ═══════════════════════════════════════════════════════════════════════


class TestPreferencesStore:
    def test_load_missing_gives_defaults(self, prefs_path):
        store = PreferencesStore.load(prefs_path)
        assert store.get() == UserPreferences()
        assert store.path == prefs_path

    def test_set_then_save(self, prefs_path):
        store = PreferencesStore(path=prefs_path)
        store.set(UserPreferences(long_break_duration_minutes=20))
        store.save()
        assert PreferencesStore.load(prefs_path).get().long_break_duration_minutes == 20
