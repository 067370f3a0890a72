import pytest
from google.genai import types
from pydantic import ValidationError

from eintsofia.infrastructure.constants.llm_constants import (
    GEMINI_TEXT_TEMPERATURE,
    GEMINI_TRANSCRIPTION_TEMPERATURE,
)
from eintsofia.services.llm.config.genai_config import GenAIConfigFactory, GenAIConfigModel, TaskType
from eintsofia.services.llm.schema_contract import build_request_schema


def test_primary_analysis_requests_json_with_schema():
    config = GenAIConfigFactory.create_config(
        TaskType.PRIMARY_ANALYSIS, {"response_schema": build_request_schema()}
    )

    assert isinstance(config, types.GenerateContentConfig)
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None


def test_derived_analysis_is_free_text():
    config = GenAIConfigFactory.create_config("derived_analysis")

    assert config.response_mime_type is None
    assert config.response_schema is None
    assert config.temperature == GEMINI_TEXT_TEMPERATURE


def test_transcription_is_deterministic_json():
    config = GenAIConfigFactory.create_config(TaskType.TRANSCRIPTION)

    assert config.response_mime_type == "application/json"
    assert config.temperature == GEMINI_TRANSCRIPTION_TEMPERATURE


def test_default_safety_settings_block_nothing():
    config = GenAIConfigFactory.create_config(TaskType.CHAT)

    assert len(config.safety_settings) == 4
    assert all(s.threshold == types.HarmBlockThreshold.BLOCK_NONE for s in config.safety_settings)


def test_custom_safety_settings_are_applied():
    config = GenAIConfigFactory.create_config(
        TaskType.DERIVED_ANALYSIS,
        {
            "safety_settings": [
                {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"}
            ]
        },
    )

    (setting,) = config.safety_settings
    assert setting.category == types.HarmCategory.HARM_CATEGORY_HARASSMENT
    assert setting.threshold == types.HarmBlockThreshold.BLOCK_ONLY_HIGH


def test_unknown_task_falls_back_to_defaults():
    config = GenAIConfigFactory.create_config("summarize_everything")

    assert config.response_mime_type is None


def test_config_model_validates_ranges():
    with pytest.raises(ValidationError):
        GenAIConfigModel(temperature=3.0)
    with pytest.raises(ValidationError):
        GenAIConfigModel(safety_settings=[{"category": "HARM_CATEGORY_HARASSMENT"}])
