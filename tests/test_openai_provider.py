from types import SimpleNamespace

import httpx
import openai
import pytest

from core.errors import UpstreamError
from llm import llm_providers
from llm.llm_providers import build_messages, complete
from llm.openai_provider import base_url_from_endpoint, openai_generate


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def create(self, **request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.response


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def reply(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


MESSAGES = [{"role": "user", "content": "hola"}]


@pytest.mark.parametrize("endpoint, expected", [
    ("http://localhost:1234/v1/chat/completions", "http://localhost:1234/v1"),
    ("http://localhost:1234/v1/chat/completions/", "http://localhost:1234/v1"),
    ("https://api.openai.com/v1", "https://api.openai.com/v1"),
])
def test_base_url_from_endpoint(endpoint, expected):
    assert base_url_from_endpoint(endpoint) == expected


def test_generate_sends_non_streaming_request():
    completions = FakeCompletions(response=reply("¡Hola!"))

    text = openai_generate(MESSAGES, model="m", temperature=0.3, client=fake_client(completions))

    assert text == "¡Hola!"
    assert completions.requests == [
        {"model": "m", "messages": MESSAGES, "temperature": 0.3, "stream": False},
    ]


@pytest.mark.parametrize("max_tokens, sent", [(None, False), (-1, False), ("unbounded", False), (0, True), (256, True)])
def test_max_tokens_only_sent_when_bounded(max_tokens, sent):
    completions = FakeCompletions(response=reply("ok"))

    openai_generate(MESSAGES, model="m", max_tokens=max_tokens, client=fake_client(completions))

    assert ("max_tokens" in completions.requests[0]) is sent


def test_default_model_comes_from_settings(monkeypatch):
    monkeypatch.setenv("AI_MODEL", "llama-3")
    completions = FakeCompletions(response=reply("ok"))

    openai_generate(MESSAGES, client=fake_client(completions))

    assert completions.requests[0]["model"] == "llama-3"


@pytest.mark.parametrize("response", [
    SimpleNamespace(choices=[]),
    SimpleNamespace(choices=None),
    reply(None),
    SimpleNamespace(),
])
def test_missing_content_raises(response):
    with pytest.raises(UpstreamError):
        openai_generate(MESSAGES, model="m", client=fake_client(FakeCompletions(response=response)))


def test_sdk_errors_become_upstream_errors():
    request = httpx.Request("POST", "http://localhost:1234/v1/chat/completions")
    error = openai.APIConnectionError(request=request)

    with pytest.raises(UpstreamError):
        openai_generate(MESSAGES, model="m", client=fake_client(FakeCompletions(error=error)))


def test_build_messages_orders_turns():
    prior = [{"role": "user", "content": "a"}, {"role": "assistant", "content": "b"}]

    messages = build_messages("sys", "c", prior)

    assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
    assert messages[-1]["content"] == "c"


def test_complete_ignores_streaming_flag(monkeypatch):
    seen = {}

    def fake_generate(messages, **kwargs):
        seen.update(kwargs, messages=messages)
        return "ok"

    monkeypatch.setattr(llm_providers, "openai_generate", fake_generate)

    assert complete("sys", "hola", temperature=0.2, stream=True) == "ok"
    assert seen["temperature"] == 0.2
    assert "stream" not in seen
    assert seen["messages"][0] == {"role": "system", "content": "sys"}


def test_unknown_provider_is_rejected(monkeypatch):
    monkeypatch.setattr(llm_providers, "LLM_PROVIDER", "nope")

    with pytest.raises(ValueError):
        llm_providers.generate_response(MESSAGES)
