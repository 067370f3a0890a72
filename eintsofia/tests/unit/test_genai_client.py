from types import SimpleNamespace

import pytest

from eintsofia.domain.models.interaction import ChatTurn
from eintsofia.services.llm.exceptions import LLMAPIError
from eintsofia.services.llm.genai_client import AsyncGenAIClient
from eintsofia.services.llm.schema_contract import build_request_schema


def _response(text="ok"):
    return SimpleNamespace(
        text=text,
        usage_metadata=SimpleNamespace(
            prompt_token_count=10, candidates_token_count=4, total_token_count=14
        ),
    )


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response or _response()
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return self.response


class FakeChat:
    def __init__(self, error=None):
        self.error = error
        self.messages = []

    async def send_message(self, message):
        self.messages.append(message)
        if self.error:
            raise self.error
        return _response("chat reply")


class FakeChats:
    def __init__(self, chat):
        self.chat = chat
        self.created = []

    def create(self, model, history, config):
        self.created.append({"model": model, "history": history, "config": config})
        return self.chat


def _client(models=None, chat=None):
    fake = SimpleNamespace(
        aio=SimpleNamespace(models=models or FakeModels(), chats=FakeChats(chat or FakeChat()))
    )
    return AsyncGenAIClient(
        api_key="unused", analysis_model="analysis-m", derived_model="derived-m",
        chat_model="chat-m", transcription_model="transcribe-m", client=fake,
    ), fake


@pytest.mark.asyncio
async def test_generate_structured_sends_media_then_prompt(media_asset):
    client, fake = _client()

    response = await client.generate_structured("analyze", media_asset, build_request_schema())

    assert response.text == "ok"
    assert response.usage.total_token_count == 14
    (call,) = fake.aio.models.calls
    assert call["model"] == "analysis-m"
    parts = call["contents"][0].parts
    assert parts[0].inline_data.data == media_asset.data
    assert parts[1].text == "analyze"
    assert call["config"].response_mime_type == "application/json"


@pytest.mark.asyncio
async def test_generate_text_uses_derived_model_without_schema():
    client, fake = _client()

    await client.generate_text("plan please")

    (call,) = fake.aio.models.calls
    assert call["model"] == "derived-m"
    assert call["contents"] == "plan please"
    assert call["config"].response_schema is None


@pytest.mark.asyncio
async def test_generate_text_can_attach_media(media_asset):
    client, fake = _client()

    await client.generate_text("summarize", media=media_asset)

    (call,) = fake.aio.models.calls
    parts = call["contents"][0].parts
    assert parts[0].inline_data.data == media_asset.data
    assert parts[1].text == "summarize"
    assert call["config"].response_mime_type is None


@pytest.mark.asyncio
async def test_sdk_errors_are_wrapped():
    client, _ = _client(models=FakeModels(error=RuntimeError("429 RESOURCE_EXHAUSTED")))

    with pytest.raises(LLMAPIError, match="RESOURCE_EXHAUSTED"):
        await client.generate_text("x")


@pytest.mark.asyncio
async def test_missing_text_is_an_api_error():
    client, _ = _client(models=FakeModels(response=SimpleNamespace(text=None, usage_metadata=None)))

    with pytest.raises(LLMAPIError):
        await client.generate_text("x")


@pytest.mark.asyncio
async def test_chat_seeds_history_in_order():
    client, fake = _client()
    history = [ChatTurn(role="user", text="anchor"), ChatTurn(role="model", text="ack")]

    response = await client.send_chat_message(history, "question")

    assert response.text == "chat reply"
    (created,) = fake.aio.chats.created
    assert created["model"] == "chat-m"
    assert [c.role for c in created["history"]] == ["user", "model"]
    assert created["history"][0].parts[0].text == "anchor"
    assert fake.aio.chats.chat.messages == ["question"]


@pytest.mark.asyncio
async def test_chat_errors_are_wrapped():
    client, _ = _client(chat=FakeChat(error=ValueError("bad history")))

    with pytest.raises(LLMAPIError):
        await client.send_chat_message([], "question")
