"""
Inputs and outputs of analysis calls: media, participants, derived-analysis
options and chat turns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, Field

from eintsofia.domain.models.prompt_config import Persona


class MediaAsset(BaseModel):
    """Binary clip sent inline to the model."""

    data: bytes
    mime_type: str = "video/mp4"
    filename: Optional[str] = None

    @property
    def size_mb(self) -> float:
        return round(len(self.data) / (1024 * 1024), 2)

    @property
    def format(self) -> str:
        if "/" in self.mime_type:
            return self.mime_type.split("/", 1)[1].upper()
        return "UNKNOWN"


class Participant(BaseModel):
    id: str
    name: str
    age: Optional[int] = None
    role: str
    relationship: Optional[str] = None
    notes: Optional[str] = None

    def describe(self) -> str:
        # Adults are listed without an age
        age = self.age if self.age is not None else "adult"
        line = f"{self.name} ({age}, {self.role})"
        if self.relationship:
            line += f" - {self.relationship}"
        return line


class SavedParticipant(Participant):
    """Participant remembered across analyses for auto-fill."""

    saved_at: datetime
    usage_count: int = Field(default=1, ge=1)


class DerivedAnalysisKind(str, Enum):
    PARTICIPANT_ANALYSIS = "participant_analysis"
    INTERVENTION_PLAN = "intervention_plan"
    CUSTOM_PLAN = "custom_plan"


class InterventionMethod(str, Enum):
    CBT = "CBT"
    DBT = "DBT"
    NARRATIVE = "Narrative"


class DerivedAnalysisOptions(BaseModel):
    depth: Literal["regular", "deep"] = "regular"
    method: Optional[InterventionMethod] = None
    focus: Optional[Literal["emotional", "cognitive"]] = None
    custom_instructions: Optional[str] = Field(default=None, alias="customInstructions")
    participants: Optional[List[Participant]] = None
    persona: Optional[Persona] = None

    model_config = {"populate_by_name": True}


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


@dataclass(frozen=True)
class ChatReply:
    """
    Outcome of a chat turn. Always carries displayable text; ``degraded`` is set
    when the text is the fallback apology instead of a model reply.
    """

    text: str
    degraded: bool = False
    error: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.text
