from datetime import datetime, timedelta, timezone

import pytest

from eintsofia.domain.models.interaction import Participant
from eintsofia.services.participant_store import ParticipantStore

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class StepClock:
    """Returns T0, then one minute later on every call."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        now = T0 + timedelta(minutes=self.calls)
        self.calls += 1
        return now


@pytest.fixture
def store(kv_store):
    return ParticipantStore(kv_store, clock=StepClock())


def _participant(name, pid="p1", **fields):
    fields.setdefault("role", "ילד")
    return Participant(id=pid, name=name, **fields)


def test_empty_store(store):
    assert store.load_all() == []
    stats = store.stats()
    assert stats.total == 0
    assert stats.most_used is None


def test_save_new_participant(store, kv_store):
    saved = store.save(_participant("Yoni", age=4, relationship="בן"))

    assert saved.usage_count == 1
    assert saved.saved_at == T0
    assert kv_store.get("ein_tsofia_participants") is not None
    (loaded,) = store.load_all()
    assert loaded == saved


def test_saving_same_name_updates_and_counts(store):
    store.save(_participant("Yoni", age=4, notes="חולצה כחולה"))
    updated = store.save(_participant("yoni", pid="p7", age=5))

    (loaded,) = store.load_all()
    assert loaded == updated
    assert loaded.usage_count == 2
    assert loaded.age == 5
    assert loaded.name == "yoni"
    assert loaded.notes is None
    assert loaded.saved_at == T0 + timedelta(minutes=1)


def test_save_many_and_stats(store):
    store.save_many(
        [_participant("Yoni"), _participant("Maya", pid="p2"), _participant("YONI", pid="p3")]
    )

    stats = store.stats()
    assert stats.total == 2
    assert stats.most_used.name == "YONI"
    assert stats.most_used.usage_count == 2


def test_unreadable_data_reads_as_empty(kv_store, store):
    kv_store.set("ein_tsofia_participants", '{"not": "a list"}')
    assert store.load_all() == []

    kv_store.set("ein_tsofia_participants", "garbage")
    assert store.load_all() == []


def test_find_match_prefers_exact_name(store):
    store.save_many(
        [
            _participant("Maya", pid="p1", notes="ילדה עם משקפיים, Dana קוראת לה"),
            _participant("dana", pid="p2"),
        ]
    )

    assert store.find_match("Dana").name == "dana"


def test_find_match_by_notes_or_age(store):
    store.save_many(
        [
            _participant("Maya", pid="p1", age=6, notes="שיער מתולתל"),
            _participant("Omer", pid="p2", age=3, notes="חולצה ירוקה"),
        ]
    )

    assert store.find_match("חולצה ירוקה").name == "Omer"
    assert store.find_match("כובע", age=6).name == "Maya"
    assert store.find_match("כובע", age=9) is None


def test_empty_description_does_not_match_notes(store):
    store.save(_participant("Maya", notes="שיער מתולתל"))

    assert store.find_match("") is None


def test_autofill_fills_name_and_appends_notes(store):
    store.save(_participant("Maya", age=6, relationship="בת", notes="אוהבת לצייר"))
    identified = [
        Participant(id="person_1", name="משתתף 1", age=6, role="ילדה", notes="שמלה צהובה"),
        Participant(id="person_2", name="משתתף 2", role="אבא", notes="זקן"),
    ]

    first, second = store.autofill(identified)

    assert first.id == "person_1"
    assert first.name == "Maya"
    assert first.relationship == "בת"
    assert first.notes == "שמלה צהובה\n\nהערות קודמות: אוהבת לצייר"
    assert second == identified[1]


def test_autofill_keeps_identified_notes_when_saved_has_none(store):
    store.save(_participant("Maya", age=6))
    identified = [Participant(id="person_1", name="משתתף 1", age=6, role="ילדה", notes="שמלה")]

    (filled,) = store.autofill(identified)

    assert filled.name == "Maya"
    assert filled.notes == "שמלה"


def test_clear(store, kv_store):
    store.save(_participant("Maya"))

    store.clear()

    assert store.load_all() == []
    assert kv_store.get("ein_tsofia_participants") is None
