"""
Parsing of multipart form fields shared by the upload routes.
"""

from typing import List, Optional

from fastapi import HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from eintsofia.domain.models.interaction import MediaAsset, Participant
from eintsofia.domain.models.prompt_config import Persona

_participants_adapter = TypeAdapter(List[Participant])


def parse_persona(value: str) -> Persona:
    try:
        return Persona(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown persona: {value}") from None


def parse_participants(raw: Optional[str]) -> Optional[List[Participant]]:
    """Participants sent as a JSON array in a form field."""
    if not raw:
        return None
    try:
        return _participants_adapter.validate_json(raw)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid participants: {e}") from e


async def read_media(upload: UploadFile, default_mime: str = "video/mp4") -> MediaAsset:
    data = await upload.read()
    if not data:
        raise HTTPException(status_code=400, detail="No media file provided")
    return MediaAsset(
        data=data,
        mime_type=upload.content_type or default_mime,
        filename=upload.filename,
    )
