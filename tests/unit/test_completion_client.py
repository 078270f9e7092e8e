"""Unit tests for the completion client."""

import json

import httpx
import pytest

from blob_text_extractor.adapters import CompletionClient, CompletionError
from blob_text_extractor.adapters.completion_client import build_translation_prompt

ENDPOINT = "https://llm.example.com/v1/completions"


def _client(handler, **kwargs) -> CompletionClient:
    return CompletionClient(
        endpoint=ENDPOINT,
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestBuildTranslationPrompt:
    """Tests for prompt construction."""

    def test_placeholder_replaced(self) -> None:
        assert build_translation_prompt("Fix this. Text: {text}", "Bonjour") == "Fix this. Text: Bonjour"

    def test_text_appended_without_placeholder(self) -> None:
        assert build_translation_prompt("Fix this: ", "Bonjour") == "Fix this: Bonjour"

    def test_braces_in_text_left_alone(self) -> None:
        assert build_translation_prompt("T: {text}", "{a}") == "T: {a}"


class TestCompletionClient:
    """Tests for CompletionClient."""

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            CompletionClient(endpoint=ENDPOINT, api_key="k", mode="edits")

        assert "Unknown completion mode" in str(exc_info.value)

    def test_missing_endpoint_raises(self) -> None:
        with pytest.raises(ValueError):
            CompletionClient(endpoint="", api_key="k")

    @pytest.mark.asyncio
    async def test_prompt_mode(self) -> None:
        """Test the prompt request shape and choices[0].text parsing."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"choices": [{"text": " Hello world"}]})

        async with _client(handler, max_tokens=200) as client:
            response = await client.complete("Translate: Bonjour")

        assert response.text == " Hello world"
        assert response.status_code == 200
        assert json.loads(response.raw) == {"choices": [{"text": " Hello world"}]}

        request = requests[0]
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert json.loads(request.content) == {"prompt": "Translate: Bonjour", "max_tokens": 200}

    @pytest.mark.asyncio
    async def test_chat_mode(self) -> None:
        """Test the messages request shape and message content parsing."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={"choices": [{"message": {"role": "assistant", "content": "Hello"}}]},
            )

        async with _client(handler, mode="chat", model="gpt-4o-mini") as client:
            response = await client.complete("Translate: Bonjour")

        assert response.text == "Hello"

        body = json.loads(requests[0].content)
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"][-1] == {"role": "user", "content": "Translate: Bonjour"}
        assert body["messages"][0]["role"] == "system"

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        """Test that a non-success status raises CompletionError with the code."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        async with _client(handler) as client:
            with pytest.raises(CompletionError) as exc_info:
                await client.complete("prompt")

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_no_choices_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": []})

        async with _client(handler) as client:
            with pytest.raises(CompletionError):
                await client.complete("prompt")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        async with _client(handler) as client:
            with pytest.raises(CompletionError) as exc_info:
                await client.complete("prompt")

        assert exc_info.value.original_error is not None
