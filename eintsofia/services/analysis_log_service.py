"""
Usage and cost logging for analyses, plus saved derived-analysis documents.
"""

import calendar
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Literal, Optional

from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.domain.models.feedback import (
    AnalysisCost,
    AnalysisLog,
    MediaMetadata,
    SavedAnalysis,
)
from eintsofia.domain.models.interaction import MediaAsset
from eintsofia.infrastructure.constants.llm_constants import (
    ANALYSIS_LOG_COLLECTION,
    GEMINI_INPUT_COST_PER_TOKEN,
    GEMINI_OUTPUT_COST_PER_TOKEN,
    SAVED_ANALYSIS_COLLECTION,
)
from eintsofia.infrastructure.persistence.document_store import DocumentStore
from eintsofia.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)

HistoryPeriod = Literal["day", "week", "month", "all"]


def compute_cost(usage: UsageMetadata) -> AnalysisCost:
    """USD cost of one call from its token counts."""
    input_cost = usage.prompt_token_count * GEMINI_INPUT_COST_PER_TOKEN
    output_cost = usage.candidates_token_count * GEMINI_OUTPUT_COST_PER_TOKEN
    return AnalysisCost(input=input_cost, output=output_cost, total=input_cost + output_cost)


def _one_month_before(now: datetime) -> datetime:
    year, month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def period_start(period: HistoryPeriod, now: datetime) -> Optional[datetime]:
    if period == "all":
        return None
    if period == "day":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return _one_month_before(now)
    raise ValueError(f"Unknown history period: {period!r}")


class AnalysisLogService:
    def __init__(
        self,
        document_store: DocumentStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.document_store = document_store
        self.clock = clock

    async def log_analysis(
        self,
        user_id: str,
        usage: Optional[UsageMetadata],
        media: MediaAsset,
        duration: Optional[float] = None,
    ) -> str:
        usage = usage or UsageMetadata()
        minutes, seconds = divmod(int(duration or 0), 60)
        log = AnalysisLog(
            user_id=user_id,
            video_metadata=MediaMetadata(
                duration=f"{minutes:02d}:{seconds:02d}",
                size=f"{media.size_mb} MB",
                format=media.format,
            ),
            usage_metadata=usage,
            cost=compute_cost(usage),
        )
        doc_id = await self.document_store.add(
            ANALYSIS_LOG_COLLECTION,
            log.model_dump(mode="json", exclude_none=True, exclude={"id", "timestamp"}),
        )
        logger.info(f"Logged analysis cost ${log.cost.total:.6f} for user {user_id}")
        return doc_id

    async def get_history(
        self, user_id: str, period: HistoryPeriod = "all"
    ) -> List[AnalysisLog]:
        """The user's analysis logs within ``period``, newest first."""
        since = period_start(period, self.clock())
        documents = await self.document_store.query(
            ANALYSIS_LOG_COLLECTION, filters={"user_id": user_id}, since=since
        )
        return [AnalysisLog.model_validate(doc) for doc in documents]

    async def save_analysis_result(
        self, user_id: str, title: str, content: str, kind: str
    ) -> str:
        saved = SavedAnalysis(user_id=user_id, title=title, content=content, type=kind)
        doc_id = await self.document_store.add(
            SAVED_ANALYSIS_COLLECTION,
            saved.model_dump(mode="json", exclude_none=True, exclude={"id", "timestamp"}),
        )
        logger.info(f"Saved {kind} analysis '{title}' for user {user_id}")
        return doc_id
