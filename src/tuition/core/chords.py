"""Inline chord markup in task details.

Task details may embed guitar chord diagrams as a six-character fingering
in parentheses followed by an optional chord name:

    "Practise (x32010) C then (320003) G"

The text is split into plain text parts and chord parts so the front end
can render a diagram for each chord.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal

CHORD_PATTERN = re.compile(r"\(([x0-9]{6})\)\s*([A-G][#bA-Za-z0-9]*)?", re.IGNORECASE)

MUTED_FINGERING = "000000"


@dataclass(frozen=True)
class TextPart:
    content: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "content": self.content}


@dataclass(frozen=True)
class ChordPart:
    fingering: str
    name: str = ""
    type: Literal["chord"] = "chord"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "fingering": self.fingering, "name": self.name}


def normalize_fingering(raw: str) -> str:
    """Upper-case X, keep only 0-9/X; anything but six strings is reset."""
    fingering = re.sub(r"[^0-9X]", "", raw.upper())
    if len(fingering) != 6:
        return MUTED_FINGERING
    return fingering


def parse_text_with_chords(text: str) -> list[TextPart | ChordPart]:
    """Split text into plain text and chord parts, in order.

    Args:
        text: Task detail text

    Returns:
        List of TextPart / ChordPart. Text without chords yields a single
        TextPart; empty text yields an empty list.
    """
    parts: list[TextPart | ChordPart] = []
    last_index = 0

    for match in CHORD_PATTERN.finditer(text or ""):
        if match.start() > last_index:
            parts.append(TextPart(content=text[last_index : match.start()]))

        parts.append(
            ChordPart(
                fingering=normalize_fingering(match.group(1)),
                name=match.group(2) or "",
            )
        )
        last_index = match.end()

    if text and last_index < len(text):
        parts.append(TextPart(content=text[last_index:]))

    return parts
