"""
Structured analysis report models.

``StructuredReport`` is the exact shape requested from the model and validated
on the way back. ``AnalysisResult`` extends it with fields that are attached
locally after the response is received and are never requested from the model.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class KeyEvent(BaseModel):
    """A timestamped moment in the clip."""

    time: str = Field(..., description="Timestamp in MM:SS")
    event: str = Field(..., description="Short description of what happened")


class ExecutiveSummary(BaseModel):
    analysis: str = Field(..., description="Executive analysis, at least 3 sentences")
    key_events: List[KeyEvent] = Field(default_factory=list)


class ResourceAudit(BaseModel):
    """Suitability of the physical resources seen in the clip."""

    dining_equipment: Optional[str] = None
    sleeping_arrangements: Optional[str] = None
    yard_equipment: Optional[str] = None
    toys_and_games: Optional[str] = None
    furniture_ergonomics: Optional[str] = None
    educational_environment: Optional[str] = None


class DevelopmentalMilestoneCheck(BaseModel):
    observed_activity: Optional[str] = None
    child_emotional_state: Optional[str] = None
    expected_milestone: Optional[str] = None
    verdict: Optional[str] = Field(
        default=None, description="Aligned | Delayed | Advanced"
    )
    professional_analysis: Optional[str] = None


class EnvironmentalScan(BaseModel):
    sensory_load: Optional[str] = Field(
        default=None, description="Noise, lighting and visual load"
    )
    layout_analysis: Optional[str] = None


class KeepRecommendation(BaseModel):
    category: str
    action: str
    professional_justification: str
    sentiment: Optional[str] = None


class CorrectionModel(BaseModel):
    """What should have been done and said instead."""

    what_to_do: Optional[str] = None
    what_to_say: Optional[str] = None


class EmotionalResponseActivity(BaseModel):
    activity_name: Optional[str] = None
    description: Optional[str] = None


class ImproveRecommendation(BaseModel):
    category: str
    action: str
    professional_justification: str
    urgency: str
    sentiment: Optional[str] = None
    correction_model: Optional[CorrectionModel] = None
    emotional_response_activities: Optional[List[EmotionalResponseActivity]] = None


class DirectorNote(BaseModel):
    note: str
    immediate_action_item: Optional[str] = None


class StakeholderNote(BaseModel):
    note: str
    justification: str


class StakeholderSpecifics(BaseModel):
    director: DirectorNote
    parents: StakeholderNote
    authority: StakeholderNote


class Scores(BaseModel):
    """Assessment scores on a 1-10 scale."""

    safety: Optional[float] = Field(default=None, ge=1, le=10)
    climate: Optional[float] = Field(default=None, ge=1, le=10)
    interaction: Optional[float] = Field(default=None, ge=1, le=10)


class StructuredReport(BaseModel):
    """Report shape requested from the model. Every field is required."""

    executive_summary: ExecutiveSummary
    resource_audit: ResourceAudit
    developmental_milestone_check: DevelopmentalMilestoneCheck
    environmental_scan: EnvironmentalScan
    recommendations_to_keep: List[KeepRecommendation]
    recommendations_to_improve: List[ImproveRecommendation]
    stakeholder_specifics: StakeholderSpecifics
    scores: Scores


class UsageMetadata(BaseModel):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


class AnalysisResult(StructuredReport):
    """Structured report plus locally attached metadata."""

    duration: Optional[float] = Field(
        default=None, ge=0, description="Elapsed processing time in seconds"
    )
    usage_metadata: Optional[UsageMetadata] = None

    def snapshot(self) -> dict:
        """JSON-ready dict used as grounding context in follow-up prompts."""
        return self.model_dump(mode="json", exclude_none=True)


class SpeakerProfile(BaseModel):
    role: str
    age_estimate: str
    gender: str


class Transcription(BaseModel):
    """Transcript of an audio clip with the speaker's emotional tone."""

    text: str
    emotion: str
    speaker_profile: SpeakerProfile
