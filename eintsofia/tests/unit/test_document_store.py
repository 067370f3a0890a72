from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from eintsofia.database import build_engine, create_tables
from eintsofia.infrastructure.persistence.document_store import (
    DocumentStoreError,
    InMemoryDocumentStore,
    SQLAlchemyDocumentStore,
)

T0 = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


class StepClock:
    def __init__(self):
        self.now = T0

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def sql_store():
    engine = build_engine("sqlite://")
    create_tables(bind=engine)
    return SQLAlchemyDocumentStore(sessionmaker(bind=engine))


@pytest.mark.asyncio
async def test_in_memory_add_assigns_id_and_timestamp():
    store = InMemoryDocumentStore(clock=StepClock())

    doc_id = await store.add("feedback_logs", {"rating": "good", "timestamp": "spoofed"})

    (doc,) = await store.query("feedback_logs")
    assert doc["id"] == doc_id
    assert doc["timestamp"] == T0 + timedelta(minutes=1)


@pytest.mark.asyncio
async def test_in_memory_query_filters_and_orders():
    store = InMemoryDocumentStore(clock=StepClock())
    await store.add("analysis_logs", {"userId": "u1", "n": 1})
    await store.add("analysis_logs", {"userId": "u2", "n": 2})
    await store.add("analysis_logs", {"userId": "u1", "n": 3})

    newest_first = await store.query("analysis_logs", filters={"userId": "u1"})
    oldest_first = await store.query("analysis_logs", filters={"userId": "u1"}, descending=False)
    recent = await store.query("analysis_logs", since=T0 + timedelta(minutes=2))

    assert [d["n"] for d in newest_first] == [3, 1]
    assert [d["n"] for d in oldest_first] == [1, 3]
    assert [d["n"] for d in recent] == [3, 2]


@pytest.mark.asyncio
async def test_in_memory_seeded_documents_without_timestamp_sort_last():
    store = InMemoryDocumentStore(
        initial={"feedback_logs": [{"rating": "bad"}, {"rating": "good", "timestamp": T0}]}
    )

    docs = await store.query("feedback_logs")

    assert [d["rating"] for d in docs] == ["good", "bad"]
    assert docs[1].get("timestamp") is None


@pytest.mark.asyncio
async def test_in_memory_returns_copies():
    store = InMemoryDocumentStore()
    await store.add("saved_analyses", {"title": "a"})

    (doc,) = await store.query("saved_analyses")
    doc["title"] = "changed"

    (again,) = await store.query("saved_analyses")
    assert again["title"] == "a"


@pytest.mark.asyncio
async def test_sqlalchemy_round_trip(sql_store):
    first = await sql_store.add("feedback_logs", {"rating": "good", "comment": "שלום"})
    second = await sql_store.add("feedback_logs", {"rating": "bad", "reasons": ["inaccurate"]})
    await sql_store.add("analysis_logs", {"userId": "u1"})

    docs = await sql_store.query("feedback_logs")

    assert [d["id"] for d in docs] == [second, first]
    assert docs[0]["reasons"] == ["inaccurate"]
    assert docs[1]["comment"] == "שלום"
    assert docs[0]["timestamp"].tzinfo is not None


@pytest.mark.asyncio
async def test_sqlalchemy_filters_and_since(sql_store):
    await sql_store.add("analysis_logs", {"userId": "u1"})
    await sql_store.add("analysis_logs", {"userId": "u2"})

    only_u2 = await sql_store.query("analysis_logs", filters={"userId": "u2"})
    future = await sql_store.query(
        "analysis_logs", since=datetime.now(timezone.utc) + timedelta(days=1)
    )

    assert [d["userId"] for d in only_u2] == ["u2"]
    assert future == []


@pytest.mark.asyncio
async def test_sqlalchemy_errors_are_wrapped():
    engine = build_engine("sqlite://")
    # No tables created
    store = SQLAlchemyDocumentStore(sessionmaker(bind=engine))

    with pytest.raises(DocumentStoreError):
        await store.query("feedback_logs")
