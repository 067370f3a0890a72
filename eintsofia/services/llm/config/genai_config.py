"""
Configuration management for Google GenAI SDK.

Builds a ``GenerateContentConfig`` per call type (primary analysis, derived
analysis, chat, transcription) from the constants, validated through pydantic.
"""

import logging
from enum import Enum
from typing import Dict, Any, List, Optional, Union
from pydantic import BaseModel, Field, field_validator

from google.genai import types
from google.genai.types import GenerateContentConfig, SafetySetting

from eintsofia.infrastructure.constants.llm_constants import (
    GEMINI_ANALYSIS_MODEL,
    GEMINI_TEMPERATURE,
    GEMINI_MAX_TOKENS,
    GEMINI_TOP_P,
    GEMINI_TOP_K,
    GEMINI_TEXT_TEMPERATURE,
    GEMINI_TRANSCRIPTION_TEMPERATURE,
    GEMINI_SAFETY_SETTINGS_BLOCK_NONE,
)

logger = logging.getLogger(__name__)


class TaskType(str, Enum):
    """Enum for the model call types."""

    PRIMARY_ANALYSIS = "primary_analysis"
    DERIVED_ANALYSIS = "derived_analysis"
    CHAT = "chat"
    TRANSCRIPTION = "transcription"
    UNKNOWN = "unknown_task"


class ResponseFormat(str, Enum):
    """Enum for response format types."""

    JSON = "application/json"
    TEXT = "text/plain"


class GenAIConfigModel(BaseModel):
    """Pydantic model for GenAI configuration validation."""

    model: str = Field(default=GEMINI_ANALYSIS_MODEL)
    temperature: float = Field(default=GEMINI_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=GEMINI_MAX_TOKENS, gt=0)
    top_p: float = Field(default=GEMINI_TOP_P, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=GEMINI_TOP_K, ge=1)
    response_mime_type: Optional[str] = None
    response_schema: Optional[Any] = None
    safety_settings: Optional[List[Dict[str, Any]]] = None
    system_instruction: Optional[str] = None

    @field_validator("safety_settings", mode="before")
    @classmethod
    def validate_safety_settings(cls, v):
        """Validate safety settings format."""
        if v is None:
            return None
        if not isinstance(v, list):
            raise ValueError("safety_settings must be a list")
        for item in v:
            if not isinstance(item, dict) or not {"category", "threshold"} <= item.keys():
                raise ValueError(
                    "each safety setting needs a 'category' and a 'threshold'"
                )
        return v


class GenAIConfigFactory:
    """Factory for creating GenAI configurations based on task type."""

    # Tasks whose reply must be JSON matching a response schema
    JSON_TASKS = {TaskType.PRIMARY_ANALYSIS, TaskType.TRANSCRIPTION}

    @staticmethod
    def create_config(
        task: Union[str, TaskType], custom_params: Optional[Dict[str, Any]] = None
    ) -> GenerateContentConfig:
        """
        Create a GenerateContentConfig for the specified task.

        Args:
            task: Task type (string or TaskType enum)
            custom_params: Optional custom parameters to override defaults
                (``response_schema``, ``safety_settings``, ``temperature``...)

        Returns:
            GenerateContentConfig object
        """
        if isinstance(task, str) and not isinstance(task, TaskType):
            try:
                task = TaskType(task)
            except ValueError:
                logger.warning(
                    f"Unknown task type: {task}, using default configuration"
                )
                task = TaskType.UNKNOWN

        config_params = {
            "model": GEMINI_ANALYSIS_MODEL,
            "temperature": GEMINI_TEMPERATURE,
            "max_output_tokens": GEMINI_MAX_TOKENS,
            "top_p": GEMINI_TOP_P,
            "top_k": GEMINI_TOP_K,
        }

        config_params = GenAIConfigFactory._apply_task_specific_config(
            task, config_params
        )

        if custom_params:
            config_params.update(custom_params)

        validated_config = GenAIConfigModel(**config_params)

        safety_settings = GenAIConfigFactory._create_safety_settings(
            validated_config.safety_settings
        )

        return GenAIConfigFactory._create_generate_content_config(
            validated_config, safety_settings
        )

    @staticmethod
    def _apply_task_specific_config(
        task: TaskType, config_params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Apply task-specific configuration parameters."""
        if task in GenAIConfigFactory.JSON_TASKS:
            config_params["response_mime_type"] = ResponseFormat.JSON.value
            logger.info(f"Using JSON response format for task: {task}")

        if task == TaskType.TRANSCRIPTION:
            config_params["temperature"] = GEMINI_TRANSCRIPTION_TEMPERATURE
        elif task in (TaskType.DERIVED_ANALYSIS, TaskType.CHAT):
            # Free text: no mime type, no schema
            config_params.pop("response_mime_type", None)
            config_params["temperature"] = GEMINI_TEXT_TEMPERATURE

        return config_params

    @staticmethod
    def _create_safety_settings(
        settings: Optional[List[Dict[str, Any]]] = None,
    ) -> List[SafetySetting]:
        """Create safety settings; defaults to blocking nothing."""
        settings = settings or GEMINI_SAFETY_SETTINGS_BLOCK_NONE
        return [
            types.SafetySetting(
                category=types.HarmCategory(item["category"]),
                threshold=types.HarmBlockThreshold(item["threshold"]),
            )
            for item in settings
        ]

    @staticmethod
    def _create_generate_content_config(
        config: GenAIConfigModel, safety_settings: List[SafetySetting]
    ) -> GenerateContentConfig:
        """Create a GenerateContentConfig from validated parameters."""
        config_dict = config.model_dump(exclude_none=True)

        response_schema = config_dict.pop("response_schema", None)

        generate_content_config = types.GenerateContentConfig(
            temperature=config_dict.get("temperature"),
            max_output_tokens=config_dict.get("max_output_tokens"),
            top_k=config_dict.get("top_k"),
            top_p=config_dict.get("top_p"),
            response_mime_type=config_dict.get("response_mime_type"),
            system_instruction=config_dict.get("system_instruction"),
            safety_settings=safety_settings,
        )

        if response_schema:
            generate_content_config.response_schema = response_schema

        return generate_content_config
