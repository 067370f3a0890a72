"""
Screening routes:
- POST /api/analyze/quick - description plus one urgent recommendation
- POST /api/analyze/safety-scan - 1-10 safety score and urgent flags
- POST /api/analyze/summary - two or three sentence event summary
- POST /api/analyze/timeline - per-participant emotion timeline
- POST /api/analyze/anomalies - analysis of the strongly negative timeline points
"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import TypeAdapter, ValidationError

from eintsofia.api.form_parsing import parse_participants, parse_persona, read_media
from eintsofia.api.schemas import EventSummaryResponse
from eintsofia.domain.models.screening import (
    Anomaly,
    EmotionPoint,
    QuickAnalysisResult,
    SafetyScanResult,
)
from eintsofia.infrastructure.container import Container, get_container
from eintsofia.services.llm.exceptions import AnalysisFailedError, LLMResponseParseError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["Screening"])

_timeline_adapter = TypeAdapter(List[EmotionPoint])


async def _run(label: str, call):
    try:
        return await call
    except AnalysisFailedError as e:
        raise HTTPException(status_code=500, detail=f"{label} failed: {e}") from e
    except LLMResponseParseError as e:
        raise HTTPException(
            status_code=502, detail=f"Model returned an unusable {label}: {e}"
        ) from e


@router.post("/quick", response_model=QuickAnalysisResult)
async def quick_analysis(
    file: UploadFile = File(...),
    participants: Optional[str] = Form(None),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[QuickAnalysis - Start] File: {file.filename}")

    participant_list = parse_participants(participants)
    asset = await read_media(file)
    result = await _run(
        "quick analysis",
        container.get_orchestrator().quick_analysis(asset, participant_list),
    )

    logger.info(f"[QuickAnalysis - End] Duration: {time.time() - start_time:.4f}s")
    return result


@router.post("/safety-scan", response_model=SafetyScanResult)
async def safety_scan(
    file: UploadFile = File(...),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[SafetyScan - Start] File: {file.filename}")

    asset = await read_media(file)
    result = await _run("safety scan", container.get_orchestrator().quick_safety_scan(asset))

    logger.info(f"[SafetyScan - End] Duration: {time.time() - start_time:.4f}s")
    return result


@router.post("/summary", response_model=EventSummaryResponse)
async def event_summary(
    file: UploadFile = File(...),
    participants: Optional[str] = Form(None),
    container: Container = Depends(get_container),
):
    participant_list = parse_participants(participants)
    asset = await read_media(file)
    summary = await _run(
        "event summary",
        container.get_orchestrator().summarize_event(asset, participant_list),
    )
    return EventSummaryResponse(summary=summary)


@router.post("/timeline", response_model=List[EmotionPoint])
async def emotion_timeline(
    file: UploadFile = File(...),
    persona: str = Form(...),
    participants: str = Form(...),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[Timeline - Start] Persona: {persona}, File: {file.filename}")

    persona_value = parse_persona(persona)
    participant_list = parse_participants(participants) or []
    asset = await read_media(file)
    points = await _run(
        "emotion timeline",
        container.get_orchestrator().generate_emotion_timeline(
            asset, participant_list, persona_value
        ),
    )

    logger.info(
        f"[Timeline - End] Duration: {time.time() - start_time:.4f}s, points={len(points)}"
    )
    return points


@router.post("/anomalies", response_model=List[Anomaly])
async def anomalies(
    file: UploadFile = File(...),
    persona: str = Form(...),
    timeline: str = Form(...),
    participants: Optional[str] = Form(None),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[Anomalies - Start] Persona: {persona}, File: {file.filename}")

    persona_value = parse_persona(persona)
    participant_list = parse_participants(participants) or []
    try:
        points = _timeline_adapter.validate_json(timeline)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid timeline: {e}") from e

    asset = await read_media(file)
    found = await _run(
        "anomaly analysis",
        container.get_orchestrator().analyze_anomalies(
            asset, points, participant_list, persona_value
        ),
    )

    logger.info(
        f"[Anomalies - End] Duration: {time.time() - start_time:.4f}s, anomalies={len(found)}"
    )
    return found
