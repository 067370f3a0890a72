import json

import pytest

from eintsofia.domain.models.analysis_result import AnalysisResult
from eintsofia.domain.models.interaction import ChatTurn, DerivedAnalysisOptions, Participant
from eintsofia.domain.models.prompt_config import Persona
from eintsofia.services.analysis_orchestrator import AnalysisOrchestrator
from eintsofia.services.llm.exceptions import (
    AnalysisFailedError,
    InvalidAnalysisOptionsError,
    InvalidAnalysisTypeError,
    LLMAPIError,
    MalformedResponseError,
    SchemaViolationError,
)
from eintsofia.services.llm.prompts.chat import EmmaChatPrompts
from eintsofia.services.llm.prompts.derived_analysis import DerivedAnalysisPrompts
from eintsofia.services.llm.prompts.personas import DEFAULT_PROMPTS


@pytest.fixture
def orchestrator(dummy_model_service, prompt_store, fake_clock):
    return AnalysisOrchestrator(dummy_model_service, prompt_store, clock=fake_clock)


@pytest.fixture
def prior_result(sample_report):
    return AnalysisResult.model_validate(sample_report)


@pytest.mark.asyncio
async def test_primary_analysis_parses_fenced_response_and_sets_duration(
    orchestrator, dummy_model_service, media_asset, sample_report, fake_clock
):
    dummy_model_service.text = "```json\n" + json.dumps(sample_report, ensure_ascii=False) + "\n```"

    result = await orchestrator.run_primary_analysis(media_asset, Persona.KINDERGARTEN)

    assert result.duration is not None and result.duration >= 0
    assert result.model_dump(mode="json", exclude_none=True, exclude={"duration", "usage_metadata"}) == sample_report
    assert result.usage_metadata.total_token_count == 1200


@pytest.mark.asyncio
async def test_primary_analysis_sends_schema_prompt_and_media(
    orchestrator, dummy_model_service, media_asset, sample_report
):
    dummy_model_service.text = json.dumps(sample_report)

    await orchestrator.run_primary_analysis(
        media_asset, "family", [Participant(id="1", name="Yoni", age=4, role="child")]
    )

    ((method, call),) = dummy_model_service.calls
    assert method == "generate_structured"
    assert call["media"] is media_asset
    assert "stakeholder_specifics" in call["schema"]["required"]
    assert DEFAULT_PROMPTS[Persona.FAMILY].sections.forensic in call["prompt"]
    assert "Yoni (4, child)" in call["prompt"]


@pytest.mark.asyncio
async def test_primary_analysis_uses_saved_override(
    orchestrator, prompt_store, dummy_model_service, media_asset, sample_report
):
    shipped = DEFAULT_PROMPTS[Persona.CAREGIVER]
    prompt_store.save(Persona.CAREGIVER, shipped.model_copy(update={"unified": "MY OWN PROMPT"}))
    dummy_model_service.text = json.dumps(sample_report)

    await orchestrator.run_primary_analysis(media_asset, Persona.CAREGIVER)

    assert dummy_model_service.calls[0][1]["prompt"].startswith("MY OWN PROMPT")


@pytest.mark.asyncio
async def test_primary_analysis_wraps_service_failure_without_retry(
    orchestrator, dummy_model_service, media_asset
):
    cause = LLMAPIError("quota exceeded")
    dummy_model_service.error = cause

    with pytest.raises(AnalysisFailedError) as exc_info:
        await orchestrator.run_primary_analysis(media_asset, Persona.FAMILY)

    assert exc_info.value.cause is cause
    assert len(dummy_model_service.calls) == 1


@pytest.mark.asyncio
async def test_primary_analysis_surfaces_parse_errors(
    orchestrator, dummy_model_service, media_asset, sample_report
):
    dummy_model_service.text = "I could not analyze this video."
    with pytest.raises(MalformedResponseError):
        await orchestrator.run_primary_analysis(media_asset, Persona.FAMILY)

    del sample_report["stakeholder_specifics"]
    dummy_model_service.text = json.dumps(sample_report)
    with pytest.raises(SchemaViolationError):
        await orchestrator.run_primary_analysis(media_asset, Persona.FAMILY)


@pytest.mark.asyncio
async def test_intervention_plan_prompt_has_method_and_headings(
    orchestrator, dummy_model_service, prior_result
):
    dummy_model_service.text = "## תוכנית"

    text = await orchestrator.run_derived_analysis(
        "intervention_plan", prior_result, {"method": "CBT", "focus": "emotional"}
    )

    assert text == "## תוכנית"
    ((method, call),) = dummy_model_service.calls
    assert method == "generate_text"
    assert "schema" not in call
    assert call["safety_settings"]
    prompt = call["prompt"]
    assert DerivedAnalysisPrompts.METHOD_DESCRIPTIONS["CBT"] in prompt
    for heading in DerivedAnalysisPrompts.INTERVENTION_PLAN_HEADINGS:
        assert heading in prompt
    assert json.dumps(prior_result.snapshot(), ensure_ascii=False, indent=2) in prompt


def test_intervention_plan_uses_production_wording(orchestrator, prior_result):
    prompt = orchestrator.build_derived_prompt(
        "intervention_plan", prior_result, {"method": "Narrative", "focus": "cognitive"}
    )

    assert "משימה: בנה תוכנית התערבות בגישת Narrative (מיקוד קוגניטיבי/שכלי)." in prompt
    assert 'החצנת הבעיה ("הבעיה היא הבעיה, האדם הוא לא הבעיה")' in prompt
    assert "נתוני הניתוח הראשוני:" in prompt


@pytest.mark.asyncio
async def test_unknown_kind_fails_before_any_model_call(
    orchestrator, dummy_model_service, prior_result
):
    with pytest.raises(InvalidAnalysisTypeError):
        await orchestrator.run_derived_analysis("unknown_kind", prior_result, {})

    assert dummy_model_service.calls == []


def test_participant_analysis_depth(orchestrator, prior_result):
    regular = orchestrator.build_derived_prompt("participant_analysis", prior_result, {"depth": "regular"})
    deep = orchestrator.build_derived_prompt("participant_analysis", prior_result, {"depth": "deep"})

    for dimension in DerivedAnalysisPrompts.PARTICIPANT_DIMENSIONS:
        assert dimension in regular
    assert DerivedAnalysisPrompts.DEEP_DIMENSION not in regular
    assert f"5. {DerivedAnalysisPrompts.DEEP_DIMENSION}" in deep


def test_custom_plan_embeds_instructions_verbatim(orchestrator, prior_result):
    instructions = 'תוכנית לשבוע הראשון, בלי "עונשים"'

    prompt = orchestrator.build_derived_prompt(
        "custom_plan", prior_result, DerivedAnalysisOptions(custom_instructions=instructions)
    )

    assert instructions in prompt
    for description in DerivedAnalysisPrompts.METHOD_DESCRIPTIONS.values():
        assert description not in prompt


@pytest.mark.parametrize(
    "kind,options",
    [
        ("intervention_plan", {"method": "CBT"}),
        ("intervention_plan", {"focus": "cognitive"}),
        ("intervention_plan", {"method": "Gestalt", "focus": "cognitive"}),
        ("custom_plan", {}),
        ("custom_plan", {"customInstructions": "   "}),
        ("participant_analysis", {"depth": "extreme"}),
    ],
)
def test_invalid_options_are_rejected(orchestrator, prior_result, kind, options):
    with pytest.raises(InvalidAnalysisOptionsError):
        orchestrator.build_derived_prompt(kind, prior_result, options)


def test_derived_prompt_accepts_raw_report_and_persona(orchestrator, sample_report):
    prompt = orchestrator.build_derived_prompt(
        "participant_analysis", sample_report, {"persona": "caregiver"}
    )

    assert DerivedAnalysisPrompts.PERSONA_AUDIENCE[Persona.CAREGIVER] in prompt
    assert sample_report["executive_summary"]["analysis"] in prompt


@pytest.mark.asyncio
async def test_derived_analysis_failure_is_surfaced(orchestrator, dummy_model_service, prior_result):
    dummy_model_service.error = RuntimeError("network down")

    with pytest.raises(AnalysisFailedError):
        await orchestrator.run_derived_analysis("participant_analysis", prior_result)


@pytest.mark.asyncio
async def test_chat_turn_orders_anchor_history_then_message(
    orchestrator, dummy_model_service, prior_result
):
    history = [ChatTurn(role="user", text="מה הציון?"), ChatTurn(role="model", text="7")]

    reply = await orchestrator.run_chat_turn(history, "ולמה?", prior_result, Persona.KINDERGARTEN)

    assert reply.text == "תשובה"
    assert reply.degraded is False
    ((method, call),) = dummy_model_service.calls
    assert method == "send_chat_message"
    sent = call["history"]
    assert sent[0].role == "user"
    assert json.dumps(prior_result.snapshot(), ensure_ascii=False, indent=2) in sent[0].text
    assert sent[1] == ChatTurn(role="model", text=EmmaChatPrompts.ACKNOWLEDGEMENT)
    assert sent[2:] == history
    assert call["message"] == "ולמה?"


@pytest.mark.asyncio
async def test_chat_turn_degrades_to_apology(orchestrator, dummy_model_service, prior_result):
    dummy_model_service.error = LLMAPIError("boom")

    reply = await orchestrator.run_chat_turn([], "שלום", prior_result)

    assert reply.text == "סליחה, נתקלתי בבעיה בעיבוד התשובה. אנא נסה שוב."
    assert reply.degraded is True
    assert "boom" in reply.error


@pytest.mark.asyncio
async def test_chat_turn_treats_empty_reply_as_failure(orchestrator, dummy_model_service):
    dummy_model_service.chat_text = "   "

    reply = await orchestrator.run_chat_turn([], "שלום", None)

    assert reply.degraded is True
    assert str(reply) == EmmaChatPrompts.APOLOGY


@pytest.mark.asyncio
async def test_transcribe(orchestrator, dummy_model_service, media_asset):
    dummy_model_service.text = json.dumps(
        {"text": "די!", "emotion": "כעס", "speaker_profile": {"role": "אבא", "age_estimate": "30-40", "gender": "זכר"}}
    )

    transcription = await orchestrator.transcribe(media_asset)

    assert transcription.emotion == "כעס"
    ((method, call),) = dummy_model_service.calls
    assert method == "transcribe"
    assert call["schema"]["required"] == ["text", "emotion", "speaker_profile"]
