"""Practice tool endpoints (tuner note lookup, chord markup)."""

from fastapi import APIRouter, HTTPException, Query, status

from tuition.core.chords import ChordPart, parse_text_with_chords
from tuition.core.tuner import note_for_frequency
from tuition.web.schemas import ChordTextRequest, ChordTextResponse, NoteResponse

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("/note", response_model=NoteResponse)
async def nearest_note(frequency: float = Query(..., gt=0, description="Frequency in Hz")) -> NoteResponse:
    """Name the note nearest a detected frequency."""
    reading = note_for_frequency(frequency)

    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Frequency must be a positive finite number",
        )

    return NoteResponse(**reading.to_dict())


@router.post("/chords", response_model=ChordTextResponse)
async def parse_chords(request: ChordTextRequest) -> ChordTextResponse:
    """Split text into plain text and inline chord parts."""
    parts = parse_text_with_chords(request.text)
    return ChordTextResponse(
        parts=[part.to_dict() for part in parts],
        chord_count=sum(1 for part in parts if isinstance(part, ChordPart)),
    )
