from __future__ import annotations

from types import SimpleNamespace

import httpx
import openai
import pytest

from breeding_advisor.application.errors import AdvisoryTransportError, MalformedAdviceError
from breeding_advisor.infrastructure.services.openai_advisory import OpenAIAdvisoryProvider


def make_client(create):
    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.mark.asyncio
async def test_complete_sends_json_request_and_returns_content():
    captured: dict = {}

    async def create(**kwargs):
        captured.update(kwargs)
        return completion('{"compatible": true}')

    provider = OpenAIAdvisoryProvider("sk-test", model="gpt-test", client=make_client(create))

    content = await provider.complete("system", "user prompt")

    assert content == '{"compatible": true}'
    assert captured["model"] == "gpt-test"
    assert captured["response_format"] == {"type": "json_object"}
    assert captured["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user prompt"},
    ]


@pytest.mark.asyncio
async def test_api_errors_become_transport_errors():
    async def create(**kwargs):
        raise openai.APIConnectionError(request=httpx.Request("POST", "https://api.test"))

    provider = OpenAIAdvisoryProvider("sk-test", client=make_client(create))

    with pytest.raises(AdvisoryTransportError):
        await provider.complete("system", "user")


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [completion(None), completion(""), SimpleNamespace(choices=[])])
async def test_empty_answers_are_malformed(response):
    async def create(**kwargs):
        return response

    provider = OpenAIAdvisoryProvider("sk-test", client=make_client(create))

    with pytest.raises(MalformedAdviceError):
        await provider.complete("system", "user")


def test_default_client_is_async_openai():
    provider = OpenAIAdvisoryProvider("sk-test", timeout_seconds=5)

    assert isinstance(provider.client, openai.AsyncOpenAI)
    assert provider.client.max_retries == 0
