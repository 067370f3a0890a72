"""
Request and response bodies for the HTTP API.

Field names of the analysis and chat bodies follow the web client
(``initialAnalysis``, ``analysisData``).
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from eintsofia.domain.models.interaction import Participant
from eintsofia.domain.models.prompt_config import Persona, PromptConfig


class CustomAnalysisData(BaseModel):
    initialAnalysis: Dict[str, Any]
    participants: Optional[List[Participant]] = None


class CustomAnalysisRequest(BaseModel):
    type: str
    data: CustomAnalysisData
    options: Dict[str, Any] = Field(default_factory=dict)


class CustomAnalysisResponse(BaseModel):
    result: str


class EmmaMessage(BaseModel):
    role: str
    text: str

    def normalized_role(self) -> Literal["user", "model"]:
        return "user" if self.role == "user" else "model"


class EmmaRequest(BaseModel):
    messages: List[EmmaMessage]
    context: Optional[str] = None
    analysisData: Optional[Dict[str, Any]] = None
    persona: Optional[Persona] = None


class EmmaResponse(BaseModel):
    response: str
    degraded: bool = False


class EventSummaryResponse(BaseModel):
    summary: str


class PromptConfigResponse(BaseModel):
    persona: Persona
    config: PromptConfig
    shipped_version: int
    has_unsaved_changes: bool = False


class FeedbackResponse(BaseModel):
    id: str


class SavedAnalysisRequest(BaseModel):
    user_id: str
    title: str
    content: str
    type: str


class HealthCheckResponse(BaseModel):
    status: str
    version: str
