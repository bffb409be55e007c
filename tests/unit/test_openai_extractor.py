"""Unit tests for the OpenAI extractor."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError, APITimeoutError

from prompt_assembler.interfaces.extractor import (
    ExtractionUnavailableError,
    MalformedExtractionError,
)
from prompt_assembler.strategies.extractors.openai import OpenAIExtractor


def _response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(result=None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=result, side_effect=error)
    client.close = AsyncMock()
    return client


_REQUEST = httpx.Request("POST", "https://api.openai.test/v1/chat/completions")


class TestOpenAIExtractor:
    """Test suite for OpenAIExtractor."""

    def test_decodes_json_answer(self):
        """Test that the JSON answer is decoded and the call is shaped correctly."""
        client = _client(_response('{"artifact_name": "Memo"}'))
        extractor = OpenAIExtractor(client, model="gpt-test", temperature=0.2)

        result = asyncio.run(extractor.extract("schema", "some text"))

        assert result == {"artifact_name": "Memo"}
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["temperature"] == 0.2
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"] == [
            {"role": "system", "content": "schema"},
            {"role": "user", "content": "some text"},
        ]

    def test_temperature_omitted_when_none(self):
        """Test that a None temperature leaves the model default."""
        client = _client(_response("{}"))

        asyncio.run(OpenAIExtractor(client, temperature=None).extract("s", "t"))

        assert "temperature" not in client.chat.completions.create.call_args.kwargs

    def test_invalid_json(self):
        """Test that a non-JSON answer raises MalformedExtractionError."""
        extractor = OpenAIExtractor(_client(_response("not json")))

        with pytest.raises(MalformedExtractionError, match="invalid JSON"):
            asyncio.run(extractor.extract("s", "t"))

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_answer(self, content):
        """Test that an empty answer is treated as malformed."""
        extractor = OpenAIExtractor(_client(_response(content)))

        with pytest.raises(MalformedExtractionError, match="empty answer"):
            asyncio.run(extractor.extract("s", "t"))

    @pytest.mark.parametrize(
        "error, message",
        [
            (APITimeoutError(request=_REQUEST), "timed out"),
            (APIConnectionError(request=_REQUEST), "Could not reach"),
        ],
    )
    def test_transport_errors(self, error, message):
        """Test that timeouts and connection errors become ExtractionUnavailableError."""
        extractor = OpenAIExtractor(_client(error=error))

        with pytest.raises(ExtractionUnavailableError, match=message):
            asyncio.run(extractor.extract("s", "t"))

    def test_aclose_closes_client(self):
        """Test that aclose closes the shared client."""
        client = _client()

        asyncio.run(OpenAIExtractor(client).aclose())

        client.close.assert_awaited_once()
