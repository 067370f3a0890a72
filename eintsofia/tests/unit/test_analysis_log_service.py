from datetime import datetime, timedelta, timezone

import pytest

from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.infrastructure.constants.llm_constants import (
    ANALYSIS_LOG_COLLECTION,
    SAVED_ANALYSIS_COLLECTION,
)
from eintsofia.infrastructure.persistence.document_store import InMemoryDocumentStore
from eintsofia.services.analysis_log_service import (
    AnalysisLogService,
    compute_cost,
    period_start,
)

NOW = datetime(2025, 3, 31, 15, 30, tzinfo=timezone.utc)


def _log(user_id, timestamp):
    return {
        "user_id": user_id,
        "timestamp": timestamp,
        "video_metadata": {"size": "1.0 MB", "format": "MP4"},
        "usage_metadata": {"prompt_token_count": 10, "candidates_token_count": 5, "total_token_count": 15},
        "cost": {"input": 0.0, "output": 0.0, "total": 0.0},
    }


def test_compute_cost_uses_per_million_rates():
    cost = compute_cost(UsageMetadata(prompt_token_count=1_000_000, candidates_token_count=1_000_000))

    assert cost.input == pytest.approx(0.075)
    assert cost.output == pytest.approx(0.30)
    assert cost.total == pytest.approx(0.375)


def test_period_start():
    assert period_start("all", NOW) is None
    assert period_start("day", NOW) == datetime(2025, 3, 31, tzinfo=timezone.utc)
    assert period_start("week", NOW) == NOW - timedelta(days=7)
    # Clamped to the last day of February
    assert period_start("month", NOW) == datetime(2025, 2, 28, 15, 30, tzinfo=timezone.utc)
    assert period_start("month", datetime(2025, 1, 15, tzinfo=timezone.utc)) == datetime(
        2024, 12, 15, tzinfo=timezone.utc
    )


@pytest.mark.asyncio
async def test_log_analysis_records_cost_and_media(media_asset):
    store = InMemoryDocumentStore(clock=lambda: NOW)
    service = AnalysisLogService(store, clock=lambda: NOW)

    await service.log_analysis(
        "u1",
        UsageMetadata(prompt_token_count=2000, candidates_token_count=500, total_token_count=2500),
        media_asset,
        duration=75.4,
    )

    (log,) = await service.get_history("u1")
    assert log.video_metadata.duration == "01:15"
    assert log.video_metadata.format == "MP4"
    assert log.cost.total == pytest.approx(2000 * 0.075e-6 + 500 * 0.30e-6)
    assert log.timestamp == NOW


@pytest.mark.asyncio
async def test_history_filters_by_user_and_period():
    store = InMemoryDocumentStore(
        initial={
            ANALYSIS_LOG_COLLECTION: [
                _log("u1", NOW - timedelta(hours=1)),
                _log("u1", NOW - timedelta(days=3)),
                _log("u1", NOW - timedelta(days=40)),
                _log("u2", NOW - timedelta(hours=2)),
            ]
        }
    )
    service = AnalysisLogService(store, clock=lambda: NOW)

    assert len(await service.get_history("u1", "day")) == 1
    assert len(await service.get_history("u1", "week")) == 2
    assert len(await service.get_history("u1", "month")) == 2
    history = await service.get_history("u1", "all")
    assert len(history) == 3
    assert history[0].timestamp > history[1].timestamp > history[2].timestamp


@pytest.mark.asyncio
async def test_save_analysis_result():
    store = InMemoryDocumentStore()
    service = AnalysisLogService(store)

    doc_id = await service.save_analysis_result("u1", "CBT plan", "## plan", "intervention_plan")

    (doc,) = await store.query(SAVED_ANALYSIS_COLLECTION)
    assert doc["id"] == doc_id
    assert doc["type"] == "intervention_plan"
