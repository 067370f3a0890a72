"""
Persona prompt configuration models.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class Persona(str, Enum):
    """Audience profile that selects prompt content and tone."""

    FAMILY = "family"
    CAREGIVER = "caregiver"
    KINDERGARTEN = "kindergarten"


class PromptSectionId(str, Enum):
    IDENTITY = "identity"
    FORENSIC = "forensic"
    PSYCHOLOGY = "psychology"
    SAFETY = "safety"
    OUTPUT = "output"
    UNIFIED = "unified"


class PromptSections(BaseModel):
    identity: str = ""
    forensic: str = ""
    psychology: str = ""
    safety: str = ""
    output: str = ""


class PromptConfig(BaseModel):
    """
    Versioned prompt bundle for one persona.

    Either ``unified`` carries the whole prompt, or the named ``sections`` are
    assembled into analysis layers.
    """

    version: int = Field(..., ge=0)
    sections: PromptSections = Field(default_factory=PromptSections)
    unified: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    sensitivity: int = Field(default=5, ge=1, le=10)
    last_updated: Optional[datetime] = None
    layout_config: Optional[List[str]] = Field(
        default=None, description="Dashboard widget order chosen in the editor"
    )

    @field_validator("keywords", mode="before")
    @classmethod
    def _dedupe_keywords(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        seen = set()
        keywords = []
        for item in v:
            keyword = str(item).strip()
            if keyword and keyword not in seen:
                seen.add(keyword)
                keywords.append(keyword)
        return keywords

    def get_section(self, section_id: PromptSectionId) -> Optional[str]:
        if section_id == PromptSectionId.UNIFIED:
            return self.unified
        return getattr(self.sections, section_id.value)

    def with_section(self, section_id: PromptSectionId, value: Optional[str]) -> "PromptConfig":
        """Return a copy with one section replaced."""
        if section_id == PromptSectionId.UNIFIED:
            return self.model_copy(update={"unified": value}, deep=True)
        sections = self.sections.model_copy(update={section_id.value: value or ""})
        return self.model_copy(update={"sections": sections}, deep=True)
