"""
PyTest configuration and fixtures.
"""

import copy

import pytest
from fastapi.testclient import TestClient

from eintsofia.api.app import app
from eintsofia.domain.models.analysis_result import UsageMetadata
from eintsofia.domain.models.interaction import MediaAsset
from eintsofia.infrastructure.config.settings import Settings
from eintsofia.infrastructure.container import (
    DOCUMENT_STORE,
    KEY_VALUE_STORE,
    MODEL_SERVICE,
    Container,
    get_container,
)
from eintsofia.infrastructure.persistence.document_store import InMemoryDocumentStore
from eintsofia.infrastructure.persistence.key_value_store import InMemoryKeyValueStore
from eintsofia.services.llm.base import ModelResponse, ModelService
from eintsofia.services.prompt_config_service import PersonaConfigurationStore


SAMPLE_REPORT = {
    "executive_summary": {
        "analysis": "הגננת מגיבה בחום לבכי של הילד. המעבר לארוחה מאורגן. יש רעש רקע גבוה.",
        "key_events": [
            {"time": "00:12", "event": "ילד בוכה ליד הדלת"},
            {"time": "00:45", "event": "הגננת מתכופפת לגובה העיניים"},
        ],
    },
    "resource_audit": {
        "dining_equipment": "כסאות מותאמים לגיל",
        "sleeping_arrangements": "לא נראה בסרטון",
        "yard_equipment": "מגלשה תקינה",
        "toys_and_games": "משחקים נגישים",
        "furniture_ergonomics": "שולחנות נמוכים",
        "educational_environment": "פינת ספרים ופינת בובות",
    },
    "developmental_milestone_check": {
        "observed_activity": "בניית מגדל קוביות",
        "child_emotional_state": "ריכוז והנאה",
        "expected_milestone": "מגדל של 6 קוביות בגיל שנתיים",
        "verdict": "Aligned",
        "professional_analysis": "מוטוריקה עדינה תואמת גיל",
    },
    "environmental_scan": {
        "sensory_load": "רעש גבוה בזמן המעבר",
        "layout_analysis": "מרחב פתוח עם פינות מוגדרות",
    },
    "recommendations_to_keep": [
        {
            "category": "Interaction",
            "action": "ירידה לגובה העיניים",
            "professional_justification": "מחזק תחושת ביטחון",
            "sentiment": "Positive",
        }
    ],
    "recommendations_to_improve": [
        {
            "category": "Safety",
            "action": "הדלת נשארה פתוחה",
            "professional_justification": "סיכון יציאה ללא השגחה",
            "urgency": "High",
            "sentiment": "Negative",
            "correction_model": {
                "what_to_do": "לסגור את הדלת לפני המעבר",
                "what_to_say": "\"אנחנו סוגרים את הדלת ויוצאים יחד\"",
            },
            "emotional_response_activities": [
                {"activity_name": "משחק הרמזור", "description": "תרגול עצירה והמתנה"}
            ],
        }
    ],
    "stakeholder_specifics": {
        "director": {"note": "לרענן נוהל דלתות", "immediate_action_item": "התקנת מחזיר דלת"},
        "parents": {"note": "הילד מסתגל היטב", "justification": "רגיעה מהירה אחרי פרידה"},
        "authority": {"note": "אין ממצא חריג", "justification": "יחס השגחה תקין"},
    },
    "scores": {"safety": 7, "climate": 8, "interaction": 9},
}


class DummyModelService(ModelService):
    """Records every call and returns canned text, or raises ``error``."""

    def __init__(self, text: str = "", chat_text: str = "תשובה", error: Exception = None):
        self.text = text
        self.chat_text = chat_text
        self.error = error
        self.usage = UsageMetadata(
            prompt_token_count=1000, candidates_token_count=200, total_token_count=1200
        )
        self.calls = []

    def _respond(self, text):
        if self.error is not None:
            raise self.error
        return ModelResponse(text=text, usage=self.usage)

    async def generate_structured(self, prompt, media, schema):
        self.calls.append(("generate_structured", {"prompt": prompt, "media": media, "schema": schema}))
        return self._respond(self.text)

    async def generate_text(self, prompt, safety_settings=None, media=None):
        self.calls.append(
            ("generate_text", {"prompt": prompt, "safety_settings": safety_settings, "media": media})
        )
        return self._respond(self.text)

    async def send_chat_message(self, history, message):
        self.calls.append(("send_chat_message", {"history": history, "message": message}))
        return self._respond(self.chat_text)

    async def transcribe(self, prompt, media, schema):
        self.calls.append(("transcribe", {"prompt": prompt, "media": media, "schema": schema}))
        return self._respond(self.text)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def sample_report():
    return copy.deepcopy(SAMPLE_REPORT)


@pytest.fixture
def dummy_model_service():
    return DummyModelService()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def prompt_store(kv_store):
    return PersonaConfigurationStore(kv_store)


@pytest.fixture
def media_asset():
    return MediaAsset(data=b"\x00\x01fake-video", mime_type="video/mp4", filename="clip.mp4")


@pytest.fixture
def container(dummy_model_service):
    """Container wired with in-memory stores and the dummy model service."""
    c = Container(Settings(env_file=None))
    c.register_service(MODEL_SERVICE, dummy_model_service)
    c.register_service(KEY_VALUE_STORE, InMemoryKeyValueStore())
    c.register_service(DOCUMENT_STORE, InMemoryDocumentStore())
    return c


@pytest.fixture
def client(container):
    """Create test client with the container dependency overridden."""
    app.dependency_overrides[get_container] = lambda: container
    yield TestClient(app)
    app.dependency_overrides.clear()
