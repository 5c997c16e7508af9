"""Completion chimes synthesised with numpy and played via QSoundEffect.

The WAV files are generated on first use and cached next to the
preferences file, so later launches only load them.

Sound names
-----------
- ``work_complete``: bright ascending arpeggio
- ``break_complete``: soft bell
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import CONFIG_DIR
from ..timer.status import TimerType

logger = logging.getLogger(__name__)

SOUNDS_DIR = CONFIG_DIR / "sounds"

SOUND_NAMES = (
    "work_complete",
    "break_complete",
)

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _envelope(length: int, attack: int, release: int, sustain: float = 0.6) -> np.ndarray:
    """Linear attack / flat sustain / linear release, in samples."""
    env = np.full(length, sustain, dtype=np.float64)
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, sustain, a)
    r = min(release, length - a)
    if r > 0:
        env[length - r:] = np.linspace(sustain, 0.0, r)
    return env


def _tone(freq: float, duration_s: float, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * duration_s)) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * freq * t)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Float samples in -1..1 → 16-bit mono PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def _generate_work_complete() -> bytes:
    """C5 → E5 → G5 → C6, last note held."""
    notes = [523.25, 659.25, 783.99, 1046.50]
    parts: list[np.ndarray] = []
    for i, freq in enumerate(notes):
        last = i == len(notes) - 1
        tone = _tone(freq, 0.35 if last else 0.1)
        parts.append(tone * _envelope(len(tone), attack=80, release=600 if last else 200))
        if not last:
            parts.append(np.zeros(int(SAMPLE_RATE * 0.02)))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_break_complete() -> bytes:
    """A4 bell with an octave overtone and a long tail."""
    duration = 1.0
    bell = _tone(440.0, duration, 0.35) + _tone(880.0, duration, 0.08)
    env = _envelope(
        len(bell),
        attack=int(SAMPLE_RATE * 0.08),
        release=int(SAMPLE_RATE * 0.6),
        sustain=0.8,
    )
    return _to_wav_bytes(bell * env)


_GENERATORS: dict[str, Callable[[], bytes]] = {
    "work_complete": _generate_work_complete,
    "break_complete": _generate_break_complete,
}


def sound_for(timer_type: TimerType) -> str:
    """Name of the chime played when *timer_type* completes."""
    if timer_type is TimerType.WORK:
        return "work_complete"
    return "break_complete"


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Generates, caches and plays the completion chimes.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_enabled(prefs.notification_sound)
        mgr.play_completion(TimerType.WORK)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        self._ensure_wav_files()
        self._load_effects()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    def play_completion(self, timer_type: TimerType) -> None:
        self.play(sound_for(timer_type))

    def _ensure_wav_files(self) -> None:
        try:
            self._sounds_dir.mkdir(parents=True, exist_ok=True)
            for name, generate in _GENERATORS.items():
                path = self._sounds_dir / f"{name}.wav"
                if not path.exists():
                    path.write_bytes(generate())
        except OSError as e:
            logger.warning("Could not cache sounds in %s: %s", self._sounds_dir, e)

    def _load_effects(self) -> None:
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                self._effects[name] = effect
