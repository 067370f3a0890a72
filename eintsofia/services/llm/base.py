"""
Model service abstraction.

The orchestrator talks to the generative model only through this interface,
which keeps it testable with a dummy implementation.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.domain.models.interaction import ChatTurn, MediaAsset

logger = logging.getLogger(__name__)


@dataclass
class ModelResponse:
    """Raw model text plus token accounting."""

    text: str
    usage: UsageMetadata = field(default_factory=UsageMetadata)


class ModelService(ABC):
    """Multimodal generative model with structured, free-text and chat calls."""

    @abstractmethod
    async def generate_structured(
        self,
        prompt: str,
        media: Optional[MediaAsset],
        schema: Dict[str, Any],
    ) -> ModelResponse:
        """
        Request JSON matching ``schema`` for a prompt and an optional media payload.
        """

    @abstractmethod
    async def generate_text(
        self,
        prompt: str,
        safety_settings: Optional[List[Dict[str, Any]]] = None,
        media: Optional[MediaAsset] = None,
    ) -> ModelResponse:
        """Free-text generation, optionally about ``media``; no response schema is attached."""

    @abstractmethod
    async def send_chat_message(
        self, history: List[ChatTurn], message: str
    ) -> ModelResponse:
        """Send ``message`` in a conversation seeded with ``history``."""

    async def transcribe(
        self, prompt: str, media: MediaAsset, schema: Dict[str, Any]
    ) -> ModelResponse:
        """Structured transcription call; defaults to ``generate_structured``."""
        return await self.generate_structured(prompt, media, schema)
