"""
Feedback, usage-history and saved-analysis routes.
"""

import logging
import time
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from eintsofia.api.schemas import FeedbackResponse, SavedAnalysisRequest
from eintsofia.domain.models.feedback import AnalysisLog, FeedbackLog
from eintsofia.infrastructure.container import Container, get_container
from eintsofia.infrastructure.persistence.document_store import DocumentStoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feedback"])


@router.post("/api/feedback", response_model=FeedbackResponse)
async def record_feedback(
    entry: FeedbackLog,
    container: Container = Depends(get_container),
):
    logger.info(f"[RecordFeedback - Start] User: {entry.user_id}, Section: {entry.section}")
    try:
        doc_id = await container.get_feedback_cache().record(entry)
    except DocumentStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to record feedback") from e
    return FeedbackResponse(id=doc_id)


@router.get("/api/feedback", response_model=List[FeedbackLog])
async def list_feedback(
    force_refresh: bool = Query(False),
    container: Container = Depends(get_container),
):
    start_time = time.time()
    logger.info(f"[ListFeedback - Start] force_refresh={force_refresh}")
    try:
        entries = await container.get_feedback_cache().list(force_refresh=force_refresh)
    except (DocumentStoreError, ValidationError) as e:
        raise HTTPException(status_code=500, detail="Failed to load feedback") from e
    logger.info(f"[ListFeedback - End] Duration: {time.time() - start_time:.4f}s")
    return entries


@router.get("/api/analysis-logs/{user_id}", response_model=List[AnalysisLog])
async def analysis_history(
    user_id: str,
    period: Literal["day", "week", "month", "all"] = Query("all"),
    container: Container = Depends(get_container),
):
    try:
        return await container.get_analysis_log_service().get_history(user_id, period)
    except DocumentStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to load analysis history") from e


@router.post("/api/saved-analyses", response_model=FeedbackResponse)
async def save_analysis(
    request: SavedAnalysisRequest,
    container: Container = Depends(get_container),
):
    try:
        doc_id = await container.get_analysis_log_service().save_analysis_result(
            request.user_id, request.title, request.content, request.type
        )
    except DocumentStoreError as e:
        raise HTTPException(status_code=500, detail="Failed to save analysis") from e
    return FeedbackResponse(id=doc_id)
