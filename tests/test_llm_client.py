"""Tagging clients against stubbed SDK objects (no network)."""

from types import SimpleNamespace

import pytest

from rolodex.config import RolodexConfig
from rolodex.llm import (
    GeminiTaggingClient,
    OpenAITaggingClient,
    SYSTEM_PROMPT,
    build_tagging_client,
    build_user_message,
)
from rolodex.llm.client import DEFAULT_BASE_URL, DEFAULT_GEMINI_MODEL, DEFAULT_OPENAI_MODEL


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.content, Exception):
            raise self.content
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai_client(content):
    client = OpenAITaggingClient(api_key="test-key")
    completions = _FakeCompletions(content)
    client.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return client, completions


def test_user_message_format():
    assert build_user_message({"contacts": [], "existing_tags": ["Café"]}) == (
        'INPUT: {"contacts": [], "existing_tags": ["Café"]}'
    )


async def test_openai_client_sends_json_mode_request():
    client, completions = _openai_client('  {"contacts": []}  ')

    reply = await client.complete_json(SYSTEM_PROMPT, "INPUT: {}")

    assert reply == '{"contacts": []}'
    assert client.request_count == 1
    call = completions.calls[0]
    assert call["model"] == DEFAULT_OPENAI_MODEL
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "INPUT: {}"},
    ]


async def test_openai_client_empty_content_is_none():
    client, _ = _openai_client(None)
    assert await client.complete_json(SYSTEM_PROMPT, "INPUT: {}") is None


async def test_openai_client_errors_propagate():
    client, completions = _openai_client(ConnectionError("refused"))

    with pytest.raises(ConnectionError):
        await client.complete_json(SYSTEM_PROMPT, "INPUT: {}")
    assert len(completions.calls) == 1


def test_openai_client_defaults_and_key_required(monkeypatch):
    client = OpenAITaggingClient(api_key="k")
    assert client.base_url == DEFAULT_BASE_URL

    monkeypatch.delenv("TAGGING_API_KEY", raising=False)
    with pytest.raises(ValueError, match="TAGGING_API_KEY"):
        OpenAITaggingClient()

    monkeypatch.setenv("TAGGING_API_KEY", "from-env")
    assert OpenAITaggingClient().api_key == "from-env"


async def test_gemini_client_requests_json():
    client = GeminiTaggingClient(api_key="test-key")
    calls = []

    def generate_content(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(text='{"contacts": []}\n')

    client.client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))

    reply = await client.complete_json(SYSTEM_PROMPT, "INPUT: {}")

    assert reply == '{"contacts": []}'
    assert calls[0]["model"] == DEFAULT_GEMINI_MODEL
    assert calls[0]["contents"] == "INPUT: {}"
    assert calls[0]["config"].response_mime_type == "application/json"


def test_gemini_client_key_required(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GEMINI_API_KEY"):
        GeminiTaggingClient()


def test_build_tagging_client_by_provider():
    openai_client = build_tagging_client(
        RolodexConfig(provider="openai", api_key="k", base_url="https://example.test/v1", model="m1")
    )
    assert isinstance(openai_client, OpenAITaggingClient)
    assert openai_client.base_url == "https://example.test/v1"
    assert openai_client.model == "m1"

    gemini_client = build_tagging_client(RolodexConfig(provider="gemini", api_key="k"))
    assert isinstance(gemini_client, GeminiTaggingClient)
    assert gemini_client.model == DEFAULT_GEMINI_MODEL
