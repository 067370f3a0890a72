import json

import pytest

from eintsofia.services.analysis_orchestrator import AnalysisOrchestrator
from eintsofia.services.analysis_session import AnalysisSession, SessionState
from eintsofia.services.llm.exceptions import (
    AnalysisFailedError,
    InvalidAnalysisTypeError,
    InvalidSessionStateError,
)


@pytest.fixture
def session(dummy_model_service, prompt_store):
    orchestrator = AnalysisOrchestrator(dummy_model_service, prompt_store)
    return AnalysisSession(orchestrator, "kindergarten")


@pytest.mark.asyncio
async def test_happy_path_with_derived_cycles(session, dummy_model_service, media_asset, sample_report):
    dummy_model_service.text = json.dumps(sample_report)
    session.begin_upload()
    session.attach_asset(media_asset)

    primary = await session.run_primary()
    assert session.state == SessionState.PRIMARY_COMPLETE

    dummy_model_service.text = "plan one"
    await session.run_derived("intervention_plan", {"method": "DBT", "focus": "cognitive"})
    dummy_model_service.text = "plan two"
    await session.run_derived("custom_plan", {"customInstructions": "short"})

    assert session.state == SessionState.DERIVED_COMPLETE
    assert session.primary_result is primary
    assert [d["text"] for d in session.derived_results] == ["plan one", "plan two"]


@pytest.mark.asyncio
async def test_failed_primary_can_restart_from_idle(session, dummy_model_service, media_asset):
    dummy_model_service.error = RuntimeError("offline")
    session.begin_upload()
    session.attach_asset(media_asset)

    with pytest.raises(AnalysisFailedError):
        await session.run_primary()
    assert session.state == SessionState.PRIMARY_FAILED
    assert isinstance(session.last_error, AnalysisFailedError)

    with pytest.raises(InvalidSessionStateError):
        await session.run_derived("custom_plan", {"customInstructions": "x"})

    session.reset()
    assert session.state == SessionState.IDLE
    session.begin_upload()
    assert session.state == SessionState.UPLOADING


@pytest.mark.asyncio
async def test_derived_requires_completed_primary(session):
    with pytest.raises(InvalidSessionStateError):
        await session.run_derived("participant_analysis")


@pytest.mark.asyncio
async def test_primary_requires_media(session):
    session.begin_upload()

    with pytest.raises(InvalidSessionStateError):
        await session.run_primary()


@pytest.mark.asyncio
async def test_failed_derived_keeps_primary(session, dummy_model_service, media_asset, sample_report):
    dummy_model_service.text = json.dumps(sample_report)
    session.begin_upload()
    session.attach_asset(media_asset)
    primary = await session.run_primary()

    with pytest.raises(InvalidAnalysisTypeError):
        await session.run_derived("horoscope")

    assert session.state == SessionState.PRIMARY_COMPLETE
    assert session.primary_result is primary


def test_cannot_upload_twice(session):
    session.begin_upload()

    with pytest.raises(InvalidSessionStateError):
        session.begin_upload()
