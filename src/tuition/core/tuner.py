"""Frequency to note mapping for the tuner tool.

Pitch detection itself happens in the browser; this only names the note
nearest a detected frequency (A4 = 440 Hz, equal temperament).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

A4_FREQUENCY = 440.0
A4_MIDI = 69
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


@dataclass(frozen=True)
class NoteReading:
    """Nearest equal-tempered note to a frequency."""

    frequency: float
    note: str
    octave: int
    midi: int
    cents: int  # offset from the nearest note, -50..50

    @property
    def label(self) -> str:
        return f"{self.note}{self.octave}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency": round(self.frequency, 1),
            "note": self.note,
            "octave": self.octave,
            "midi": self.midi,
            "cents": self.cents,
            "label": self.label,
        }


def note_for_frequency(frequency: float) -> NoteReading | None:
    """Name the note nearest to a frequency in Hz.

    Returns None for non-positive or non-finite input.
    """
    if not isinstance(frequency, (int, float)) or not math.isfinite(frequency) or frequency <= 0:
        return None

    exact = A4_MIDI + 12 * math.log2(frequency / A4_FREQUENCY)
    midi = round(exact)
    return NoteReading(
        frequency=float(frequency),
        note=NOTE_NAMES[midi % 12],
        octave=midi // 12 - 1,
        midi=midi,
        cents=round((exact - midi) * 100),
    )
