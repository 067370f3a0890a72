"""
Asynchronous Google GenAI client.

Implements ``ModelService`` on top of ``genai.Client().aio``. Every call is a
single request; SDK errors are wrapped in ``LLMAPIError``.
"""

import logging
from typing import Any, Dict, List, Optional

import google.genai as genai
from google.genai import types

from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.domain.models.interaction import ChatTurn, MediaAsset
from eintsofia.infrastructure.constants.llm_constants import (
    GEMINI_ANALYSIS_MODEL,
    GEMINI_CHAT_MODEL,
    GEMINI_DERIVED_MODEL,
    GEMINI_TRANSCRIPTION_MODEL,
)
from eintsofia.services.llm.base import ModelResponse, ModelService
from eintsofia.services.llm.config.genai_config import GenAIConfigFactory, TaskType
from eintsofia.services.llm.exceptions import LLMAPIError

logger = logging.getLogger(__name__)


class AsyncGenAIClient(ModelService):
    """
    Gemini-backed model service.

    One model name per call type; see ``Settings.get_model_config``.
    """

    def __init__(
        self,
        api_key: str,
        analysis_model: str = GEMINI_ANALYSIS_MODEL,
        derived_model: str = GEMINI_DERIVED_MODEL,
        chat_model: str = GEMINI_CHAT_MODEL,
        transcription_model: str = GEMINI_TRANSCRIPTION_MODEL,
        client: Optional[Any] = None,
    ):
        """
        Initialize the AsyncGenAIClient.

        Args:
            api_key: Google API key
            analysis_model: model for the structured primary analysis
            derived_model: model for derived free-text analyses
            chat_model: model for the conversational assistant
            transcription_model: model for audio transcription
            client: pre-built ``genai.Client`` (tests)
        """
        self.analysis_model = analysis_model
        self.derived_model = derived_model
        self.chat_model = chat_model
        self.transcription_model = transcription_model

        if client is not None:
            self.client = client
            return

        try:
            self.client = genai.Client(api_key=api_key)
            logger.info("Successfully initialized genai with Client() constructor")
        except Exception as e:
            logger.error(
                f"An unexpected error occurred during genai client initialization: {e}"
            )
            raise ValueError(f"Failed to initialize Gemini client: {e}") from e

    @staticmethod
    def _usage_from(response: Any) -> UsageMetadata:
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return UsageMetadata()
        return UsageMetadata(
            prompt_token_count=getattr(usage, "prompt_token_count", None) or 0,
            candidates_token_count=getattr(usage, "candidates_token_count", None) or 0,
            total_token_count=getattr(usage, "total_token_count", None) or 0,
        )

    @classmethod
    def _to_model_response(cls, response: Any) -> ModelResponse:
        text = getattr(response, "text", None)
        if text is None:
            raise LLMAPIError("Model returned no text (blocked or empty candidate)")
        return ModelResponse(text=text, usage=cls._usage_from(response))

    @staticmethod
    def _media_contents(prompt: str, media: Optional[MediaAsset]) -> List[Any]:
        parts = []
        if media is not None:
            parts.append(types.Part.from_bytes(data=media.data, mime_type=media.mime_type))
        parts.append(types.Part.from_text(text=prompt))
        return [types.Content(role="user", parts=parts)]

    async def _generate(self, model: str, contents: Any, config: Any, label: str):
        logger.info(f"Calling client.aio.models.generate_content for {label} with model={model}")
        try:
            response = await self.client.aio.models.generate_content(
                model=model, contents=contents, config=config
            )
        except Exception as e:
            logger.error(
                f"Error calling client.aio.models.generate_content for model '{model}': {e}",
                exc_info=True,
            )
            raise LLMAPIError(f"Gemini API call failed: {e}") from e
        return self._to_model_response(response)

    async def generate_structured(
        self,
        prompt: str,
        media: Optional[MediaAsset],
        schema: Dict[str, Any],
    ) -> ModelResponse:
        config = GenAIConfigFactory.create_config(
            TaskType.PRIMARY_ANALYSIS,
            {"model": self.analysis_model, "response_schema": schema},
        )
        return await self._generate(
            self.analysis_model,
            self._media_contents(prompt, media),
            config,
            "primary analysis",
        )

    async def transcribe(
        self, prompt: str, media: MediaAsset, schema: Dict[str, Any]
    ) -> ModelResponse:
        config = GenAIConfigFactory.create_config(
            TaskType.TRANSCRIPTION,
            {"model": self.transcription_model, "response_schema": schema},
        )
        return await self._generate(
            self.transcription_model,
            self._media_contents(prompt, media),
            config,
            "transcription",
        )

    async def generate_text(
        self,
        prompt: str,
        safety_settings: Optional[List[Dict[str, Any]]] = None,
        media: Optional[MediaAsset] = None,
    ) -> ModelResponse:
        custom_params: Dict[str, Any] = {"model": self.derived_model}
        if safety_settings is not None:
            custom_params["safety_settings"] = safety_settings
        config = GenAIConfigFactory.create_config(TaskType.DERIVED_ANALYSIS, custom_params)
        contents = self._media_contents(prompt, media) if media is not None else prompt
        return await self._generate(self.derived_model, contents, config, "derived analysis")

    async def send_chat_message(
        self, history: List[ChatTurn], message: str
    ) -> ModelResponse:
        config = GenAIConfigFactory.create_config(
            TaskType.CHAT, {"model": self.chat_model}
        )
        contents = [
            types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)])
            for turn in history
        ]
        logger.info(
            f"Sending chat message with {len(contents)} context turns, model={self.chat_model}"
        )
        try:
            chat = self.client.aio.chats.create(
                model=self.chat_model, history=contents, config=config
            )
            response = await chat.send_message(message)
        except Exception as e:
            logger.error(f"Error sending chat message: {e}", exc_info=True)
            raise LLMAPIError(f"Gemini chat call failed: {e}") from e
        return self._to_model_response(response)
