"""Tests for the chat completions adapter."""

import asyncio
import json

import httpx
import pytest
from openai import AsyncOpenAI

from meal_tracker.adapters.openai_vision_client import OpenAIFoodRecognitionClient
from meal_tracker.errors import (
    MalformedUpstreamResponse,
    QuotaExceeded,
    RateLimited,
    UpstreamError,
)
from meal_tracker.services.vision import build_messages

BASE_URL = "https://gateway.test/v1"


def _completion(content: str) -> dict[str, object]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "google/gemini-2.5-flash",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


def _client(handler) -> OpenAIFoodRecognitionClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return OpenAIFoodRecognitionClient(
        client=AsyncOpenAI(
            api_key="vision-key",
            base_url=BASE_URL,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=transport),
        )
    )


def _complete(client: OpenAIFoodRecognitionClient) -> str:
    return asyncio.run(
        client.complete(
            model="google/gemini-2.5-flash",
            temperature=0.3,
            messages=build_messages("data:image/jpeg;base64,ZmFrZQ=="),
        )
    )


def test_complete_returns_first_choice_content() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_completion('{"name": "Poha"}'))

    content = _complete(_client(handler))

    assert content == '{"name": "Poha"}'
    request = requests[0]
    assert request.url.path.endswith("/chat/completions")
    assert request.headers["authorization"] == "Bearer vision-key"
    body = json.loads(request.content)
    assert body["model"] == "google/gemini-2.5-flash"
    assert body["temperature"] == 0.3
    assert body["messages"][0]["role"] == "system"


@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [
        (429, RateLimited),
        (402, QuotaExceeded),
        (500, UpstreamError),
        (400, UpstreamError),
    ],
)
def test_complete_maps_error_statuses(status_code: int, error_type: type) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(status_code)
        return httpx.Response(status_code, json={"error": {"message": "nope"}})

    with pytest.raises(error_type):
        _complete(_client(handler))
    assert len(calls) == 1


def test_upstream_error_keeps_status_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="gateway down")

    with pytest.raises(UpstreamError) as excinfo:
        _complete(_client(handler))

    assert excinfo.value.status_code == 503
    assert excinfo.value.body == "gateway down"


def test_connection_failure_is_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamError) as excinfo:
        _complete(_client(handler))

    assert excinfo.value.status_code is None


def test_empty_choices_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _completion("")
        payload["choices"] = []
        return httpx.Response(200, json=payload)

    with pytest.raises(MalformedUpstreamResponse):
        _complete(_client(handler))


def test_create_disables_sdk_retries() -> None:
    client = OpenAIFoodRecognitionClient.create(
        api_key="vision-key", base_url=BASE_URL, timeout_seconds=5
    )

    assert client.client.max_retries == 0
    assert str(client.client.base_url).startswith(BASE_URL)
    asyncio.run(client.close())


def test_non_json_success_body_is_malformed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, text="<html>gateway</html>", headers={"content-type": "text/html"}
        )

    with pytest.raises(MalformedUpstreamResponse):
        _complete(_client(handler))
