"""
Feedback and usage log models stored in the document store.
"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, model_validator

from eintsofia.domain.models.analysis_result import UsageMetadata


class FeedbackLog(BaseModel):
    """One user rating of a report section. Append-only."""

    id: Optional[str] = None
    user_id: str
    section: str
    rating: Literal["good", "bad"]
    reasons: Optional[List[str]] = None
    comment: Optional[str] = None
    context_data: Optional[str] = None
    timestamp: Optional[datetime] = None

    @model_validator(mode="after")
    def _reasons_only_for_bad(self):
        if self.rating == "good" and self.reasons:
            raise ValueError("reasons are only accepted for a 'bad' rating")
        return self


class MediaMetadata(BaseModel):
    duration: str = "00:00"
    size: str
    resolution: str = "Unknown"
    format: str


class AnalysisCost(BaseModel):
    input: float
    output: float
    total: float


class AnalysisLog(BaseModel):
    id: Optional[str] = None
    user_id: str
    timestamp: Optional[datetime] = None
    video_metadata: MediaMetadata
    usage_metadata: UsageMetadata
    cost: AnalysisCost


class SavedAnalysis(BaseModel):
    id: Optional[str] = None
    user_id: str
    title: str
    content: str
    type: str
    timestamp: Optional[datetime] = None
