"""
Conversational context for the Emma assistant.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from eintsofia.domain.models.analysis_result import AnalysisResult
from eintsofia.domain.models.interaction import ChatTurn
from eintsofia.domain.models.prompt_config import Persona
from eintsofia.infrastructure.constants.llm_constants import CHAT_MAX_HISTORY_TURNS
from eintsofia.services.llm.prompts.chat import EmmaChatPrompts

logger = logging.getLogger(__name__)


class ConversationContextManager:
    """
    Builds the turn sequence sent before each new chat message.

    Order is fixed: identity and report anchor, the model's acknowledgement,
    then the most recent ``max_history_turns`` history turns.
    """

    def __init__(self, max_history_turns: int = CHAT_MAX_HISTORY_TURNS):
        if max_history_turns < 0:
            raise ValueError("max_history_turns must be non-negative")
        self.max_history_turns = max_history_turns

    def anchor_text(
        self,
        anchor_result: Optional[Union[AnalysisResult, Dict[str, Any]]],
        persona: Optional[Persona] = None,
    ) -> str:
        if not anchor_result:
            return EmmaChatPrompts.GENERAL_IDENTITY
        snapshot = (
            anchor_result.snapshot()
            if isinstance(anchor_result, AnalysisResult)
            else anchor_result
        )
        return EmmaChatPrompts.anchor(snapshot, persona)

    def bounded_history(self, history: List[ChatTurn]) -> List[ChatTurn]:
        if self.max_history_turns == 0:
            return []
        trimmed = list(history)[-self.max_history_turns :]
        if len(history) > self.max_history_turns:
            # A cut history restarts on a user turn after the acknowledgement
            while trimmed and trimmed[0].role != "user":
                trimmed = trimmed[1:]
        if len(trimmed) < len(history):
            logger.debug(f"Trimmed chat history from {len(history)} to {len(trimmed)} turns")
        return trimmed

    def build_context(
        self,
        history: List[ChatTurn],
        anchor_result: Optional[Union[AnalysisResult, Dict[str, Any]]],
        persona: Optional[Persona] = None,
    ) -> List[ChatTurn]:
        return [
            ChatTurn(role="user", text=self.anchor_text(anchor_result, persona)),
            ChatTurn(role="model", text=EmmaChatPrompts.ACKNOWLEDGEMENT),
            *self.bounded_history(history),
        ]
