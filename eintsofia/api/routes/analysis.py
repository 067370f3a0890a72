"""
Analysis routes:
- POST /api/analyze - primary structured analysis of an uploaded clip
- POST /api/analyze/custom - derived analysis of a prior report
- POST /api/emma - chat with Emma about a report
- POST /api/transcribe - transcribe a voice note
"""

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from eintsofia.api.form_parsing import parse_participants, parse_persona, read_media
from eintsofia.api.schemas import (
    CustomAnalysisRequest,
    CustomAnalysisResponse,
    EmmaRequest,
    EmmaResponse,
)
from eintsofia.domain.models.analysis_result import AnalysisResult, Transcription
from eintsofia.domain.models.interaction import ChatTurn, MediaAsset
from eintsofia.infrastructure.container import Container, get_container
from eintsofia.infrastructure.persistence.document_store import DocumentStoreError
from eintsofia.services.llm.exceptions import (
    AnalysisFailedError,
    InvalidAnalysisOptionsError,
    InvalidAnalysisTypeError,
    LLMResponseParseError,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


@router.post("/api/analyze", response_model=AnalysisResult)
async def analyze(
    file: UploadFile = File(...),
    persona: str = Form(...),
    user_id: Optional[str] = Form(None),
    participants: Optional[str] = Form(None),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[Analyze - Start] Persona: {persona}, File: {file.filename}")

    persona_value = parse_persona(persona)
    participant_list = parse_participants(participants)

    session = container.new_session(persona_value)
    session.begin_upload()
    asset = await read_media(file)
    session.attach_asset(asset)

    try:
        result = await session.run_primary(participant_list)
    except AnalysisFailedError as e:
        raise HTTPException(status_code=500, detail=f"Analysis failed: {e}") from e
    except LLMResponseParseError as e:
        raise HTTPException(
            status_code=502, detail=f"Model returned an unusable report: {e}"
        ) from e

    if user_id:
        try:
            await container.get_analysis_log_service().log_analysis(
                user_id, result.usage_metadata, asset, result.duration
            )
        except DocumentStoreError as e:
            logger.warning(f"Could not log analysis cost for {user_id}: {e}")

    logger.info(f"[Analyze - End] Duration: {time.time() - start_time:.4f}s")
    return result


@router.post("/api/analyze/custom", response_model=CustomAnalysisResponse)
async def analyze_custom(
    request: CustomAnalysisRequest,
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[CustomAnalysis - Start] Type: {request.type}")

    options = dict(request.options)
    if request.data.participants:
        options["participants"] = [p.model_dump() for p in request.data.participants]

    try:
        text = await container.get_orchestrator().run_derived_analysis(
            request.type, request.data.initialAnalysis, options
        )
    except InvalidAnalysisTypeError as e:
        raise HTTPException(status_code=400, detail="Invalid analysis type") from e
    except InvalidAnalysisOptionsError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except AnalysisFailedError as e:
        raise HTTPException(
            status_code=500, detail=f"Failed to generate analysis: {e}"
        ) from e

    logger.info(f"[CustomAnalysis - End] Duration: {time.time() - start_time:.4f}s")
    return CustomAnalysisResponse(result=text)


@router.post("/api/emma", response_model=EmmaResponse)
async def emma(
    request: EmmaRequest,
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[Emma - Start] Messages: {len(request.messages)}, Context: {request.context}")

    if not request.messages or request.messages[-1].normalized_role() != "user":
        raise HTTPException(status_code=400, detail="Invalid messages format")

    *previous, latest = request.messages
    history = [ChatTurn(role=m.normalized_role(), text=m.text) for m in previous]
    anchor = request.analysisData if request.context == "analysis" else None

    reply = await container.get_orchestrator().run_chat_turn(
        history, latest.text, anchor, request.persona
    )

    logger.info(
        f"[Emma - End] Duration: {time.time() - start_time:.4f}s, degraded={reply.degraded}"
    )
    return EmmaResponse(response=reply.text, degraded=reply.degraded)


@router.post("/api/transcribe", response_model=Transcription)
async def transcribe(
    audio: UploadFile = File(...),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[Transcribe - Start] File: {audio.filename}")

    data = await audio.read()
    if not data:
        raise HTTPException(status_code=400, detail="No audio file provided")

    asset = MediaAsset(
        data=data, mime_type=audio.content_type or "audio/webm", filename=audio.filename
    )
    try:
        transcription = await container.get_orchestrator().transcribe(asset)
    except (AnalysisFailedError, LLMResponseParseError) as e:
        raise HTTPException(status_code=500, detail="Transcription failed") from e

    logger.info(f"[Transcribe - End] Duration: {time.time() - start_time:.4f}s")
    return transcription
