"""
Fast screening calls made before or beside the full report: participant
identification, the quick analysis, the safety scan, the emotion timeline and
its anomalies.

As in ``analysis_result``, the base models are the shapes requested from the
model; subclasses add fields attached locally after the reply. Camel-case
aliases are the keys the prompts ask for.
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.domain.models.interaction import Participant

UNKNOWN_PARTICIPANT_NAME = "לא ידוע"


def timestamp_to_seconds(timestamp: str) -> int:
    """``"MM:SS"`` to seconds; raises ``ValueError`` on anything else."""
    minutes, seconds = timestamp.strip().split(":")
    return int(minutes) * 60 + int(seconds)


class IdentifiedPerson(BaseModel):
    """One person as counted by the identification call."""

    id: Optional[str] = None
    estimated_age: Optional[str] = Field(
        default=None, description="Numeric age, or 'מבוגר' for an adult man"
    )
    age_category: Optional[str] = Field(default=None, description="ילד | נער | מבוגר")
    gender: Optional[str] = Field(default=None, description="זכר | נקבה | לא ברור")
    appearance: Optional[str] = None
    likely_role: Optional[str] = None

    @field_validator("estimated_age", mode="before")
    @classmethod
    def _age_as_text(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    def numeric_age(self) -> Optional[int]:
        if self.estimated_age is None:
            return None
        try:
            return int(float(self.estimated_age))
        except ValueError:
            return None

    def display_age(self) -> Optional[int]:
        """
        Age shown for the participant.

        Children and teenagers keep their age, adult women keep the (already
        reduced) age they were given, and adult men are shown without one.
        """
        age = self.numeric_age()
        if self.age_category in ("ילד", "נער"):
            return age
        if self.age_category == "מבוגר" and self.gender == "נקבה":
            return age
        return None

    def to_participant(self, index: int) -> Participant:
        """Participant for the person at zero-based ``index``."""
        notes = self.appearance or ""
        if self.gender:
            notes += f" ({self.gender})"
        return Participant(
            id=self.id or f"person_{index + 1}",
            name=f"משתתף {index + 1}",
            age=self.display_age(),
            role=self.likely_role or "אחר",
            notes=notes.strip(),
        )


class ParticipantIdentification(BaseModel):
    participants: List[Participant]
    duration: Optional[float] = Field(default=None, ge=0)
    usage_metadata: Optional[UsageMetadata] = None


class QuickRecommendation(BaseModel):
    title: str
    explanation: str
    why_it_works: str
    icon: Optional[str] = None


class QuickAnalysis(BaseModel):
    """Two-part fast analysis: a description and one recommendation."""

    description: str = Field(
        ..., description="Setting, safety, audio and the evidence behind them"
    )
    recommendation: QuickRecommendation


class QuickAnalysisResult(QuickAnalysis):
    duration: Optional[float] = Field(default=None, ge=0)
    usage_metadata: Optional[UsageMetadata] = None


class SafetyVerdict(str, Enum):
    SAFE = "safe"
    CONCERNING = "concerning"
    UNSAFE = "unsafe"


class SafetyScan(BaseModel):
    score: float = Field(..., ge=1, le=10, description="10 = very safe")
    verdict: SafetyVerdict
    urgent_flags: List[str] = Field(default_factory=list)


class SafetyScanResult(SafetyScan):
    duration: Optional[float] = Field(default=None, ge=0)
    usage_metadata: Optional[UsageMetadata] = None


class EmotionReading(BaseModel):
    """One participant's emotional level at one moment."""

    timestamp: str = Field(..., description="MM:SS")
    participant_id: str = Field(..., alias="participantId")
    emotion_level: int = Field(..., alias="emotionLevel", ge=1, le=5)
    event: str

    model_config = {"populate_by_name": True}


class EmotionPoint(EmotionReading):
    timestamp_seconds: int
    participant_name: str = UNKNOWN_PARTICIPANT_NAME


class AnomalyFinding(BaseModel):
    """Analysis of one strongly negative moment."""

    timestamp: str = Field(..., description="MM:SS")
    participant_id: str = Field(..., alias="participantId")
    emotion_level: int = Field(..., alias="emotionLevel", ge=1, le=5)
    description: str
    severity: Literal["low", "medium", "high"]

    model_config = {"populate_by_name": True}


class Anomaly(AnomalyFinding):
    timestamp_seconds: int
    participant_name: str = UNKNOWN_PARTICIPANT_NAME
