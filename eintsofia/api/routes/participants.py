"""
Participant routes:
- POST /api/participants/identify - identify the people in a clip
- GET/POST/DELETE /api/participants - participants remembered across analyses
- GET /api/participants/stats - count and most frequently saved participant
"""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from eintsofia.api.form_parsing import read_media
from eintsofia.domain.models.interaction import Participant, SavedParticipant
from eintsofia.domain.models.screening import ParticipantIdentification
from eintsofia.infrastructure.container import Container, get_container
from eintsofia.services.llm.exceptions import AnalysisFailedError, LLMResponseParseError
from eintsofia.services.participant_store import ParticipantStats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/participants", tags=["Participants"])


@router.post("/identify", response_model=ParticipantIdentification)
async def identify_participants(
    file: UploadFile = File(...),
    autofill: bool = Form(True),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[IdentifyParticipants - Start] File: {file.filename}, autofill={autofill}")

    asset = await read_media(file)
    try:
        identification = await container.get_orchestrator().identify_participants(asset)
    except AnalysisFailedError as e:
        raise HTTPException(
            status_code=500, detail=f"Participant identification failed: {e}"
        ) from e
    except LLMResponseParseError as e:
        raise HTTPException(
            status_code=502, detail=f"Model returned unusable participants: {e}"
        ) from e

    if autofill:
        filled = container.get_participant_store().autofill(identification.participants)
        identification = identification.model_copy(update={"participants": filled})

    logger.info(
        f"[IdentifyParticipants - End] Duration: {time.time() - start_time:.4f}s, "
        f"found={len(identification.participants)}"
    )
    return identification


@router.get("", response_model=List[SavedParticipant])
async def list_participants(container: Container = Depends(get_container)):
    return container.get_participant_store().load_all()


@router.post("", response_model=List[SavedParticipant])
async def save_participants(
    participants: List[Participant],
    container: Container = Depends(get_container),
):
    return container.get_participant_store().save_many(participants)


@router.delete("", status_code=204)
async def clear_participants(container: Container = Depends(get_container)):
    container.get_participant_store().clear()


@router.get("/stats", response_model=ParticipantStats)
async def participant_stats(container: Container = Depends(get_container)):
    return container.get_participant_store().stats()
