"""Tests for the AI provider adapters, against mocked HTTP endpoints."""

import base64
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from compliance_ai.infrastructure.ai import (
    NO_DOCUMENT_DISCLAIMER,
    AIProviderFactory,
    AIProviderName,
    ClaudeProvider,
    GeminiProvider,
    MistralProvider,
)
from compliance_ai.modules.common.exceptions import (
    ProviderKeyMissingError,
    ProviderRequestFailedError,
    ProviderResponseMalformedError,
)
from compliance_ai.modules.parameter.provider import AnalysisConfig

PDF_BASE64 = base64.b64encode(b"%PDF-1.7 compliance report").decode("ascii")


def keys(**api_keys: str) -> AnalysisConfig:
    return AnalysisConfig(
        provider=AIProviderName.CLAUDE,
        api_keys={AIProviderName(name): value for name, value in api_keys.items()},
    )


class RecordingTransport:
    """Wraps ``httpx.MockTransport`` and keeps every request it served."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return respond(request)

        self.transport = httpx.MockTransport(handler)

    @property
    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


def claude_reply(text: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


def gemini_reply(text: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def mistral_reply(text: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


def make_provider(cls, recorder: RecordingTransport, key_source: AnalysisConfig, **kwargs):
    return cls(
        key_source=key_source,
        model="test-model",
        api_url="https://ai.test/v1/endpoint",
        transport=recorder.transport,
        **kwargs,
    )


class TestClaudeProvider:
    async def test_send_with_pdf(self):
        """Test a PDF is sent as a base64 document block before the prompt."""
        recorder = RecordingTransport(claude_reply('{"summary": "ok"}'))
        provider = make_provider(ClaudeProvider, recorder, keys(claude="sk-claude"), api_version="2023-06-01")

        result = await provider.send_with_document("Analyze this", PDF_BASE64, media_type="application/pdf")

        assert result == '{"summary": "ok"}'
        request = recorder.requests[-1]
        assert request.headers["x-api-key"] == "sk-claude"
        assert request.headers["anthropic-version"] == "2023-06-01"
        payload = recorder.last_json
        assert payload["model"] == "test-model"
        assert payload["max_tokens"] == 4096
        content = payload["messages"][0]["content"]
        assert content[0] == {
            "type": "document",
            "source": {"type": "base64", "media_type": "application/pdf", "data": PDF_BASE64},
        }
        assert content[1] == {"type": "text", "text": "Analyze this"}

    async def test_send_with_plain_text_document(self):
        """Test plain text is attached as a decoded text source."""
        recorder = RecordingTransport(claude_reply("done"))
        provider = make_provider(ClaudeProvider, recorder, keys(claude="sk-claude"))
        encoded = base64.b64encode("Clause 4.2: retention is 5 years".encode()).decode("ascii")

        await provider.send_with_document("Analyze this", encoded, media_type="text/plain")

        source = recorder.last_json["messages"][0]["content"][0]["source"]
        assert source == {"type": "text", "media_type": "text/plain", "data": "Clause 4.2: retention is 5 years"}

    async def test_word_document_falls_back_to_text_with_disclaimer(self):
        """Test formats Claude cannot attach are replaced by the no-document disclaimer."""
        recorder = RecordingTransport(claude_reply("done"))
        provider = make_provider(ClaudeProvider, recorder, keys(claude="sk-claude"))

        await provider.send_with_document("Analyze this", PDF_BASE64, media_type="application/msword")

        content = recorder.last_json["messages"][0]["content"]
        assert isinstance(content, str)
        assert content.startswith("Analyze this")
        assert NO_DOCUMENT_DISCLAIMER in content
        assert PDF_BASE64 not in content

    async def test_response_without_text_block(self):
        """Test a reply without a text block is reported as malformed."""
        recorder = RecordingTransport(lambda request: httpx.Response(200, json={"content": [{"type": "tool_use"}]}))
        provider = make_provider(ClaudeProvider, recorder, keys(claude="sk-claude"))

        with pytest.raises(ProviderResponseMalformedError):
            await provider.send_text_only("Hello")


class TestGeminiProvider:
    async def test_send_with_pdf(self):
        """Test the document is sent as inline data with the key in a header."""
        recorder = RecordingTransport(gemini_reply("analysis"))
        provider = make_provider(GeminiProvider, recorder, keys(gemini="gm-key"), temperature=0.2, max_tokens=1024)

        result = await provider.send_with_document("Analyze this", PDF_BASE64)

        assert result == "analysis"
        request = recorder.requests[-1]
        assert str(request.url) == "https://ai.test/v1/endpoint/test-model:generateContent"
        assert request.headers["x-goog-api-key"] == "gm-key"
        assert "key=" not in str(request.url)
        payload = recorder.last_json
        assert payload["contents"][0]["parts"] == [
            {"inline_data": {"mime_type": "application/pdf", "data": PDF_BASE64}},
            {"text": "Analyze this"},
        ]
        assert payload["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 1024}

    async def test_missing_candidates(self):
        """Test a reply without candidates is reported as malformed."""
        recorder = RecordingTransport(lambda request: httpx.Response(200, json={"candidates": []}))
        provider = make_provider(GeminiProvider, recorder, keys(gemini="gm-key"))

        with pytest.raises(ProviderResponseMalformedError):
            await provider.send_text_only("Hello")


class TestMistralProvider:
    async def test_send_text_only(self):
        """Test the chat completion payload and bearer authentication."""
        recorder = RecordingTransport(mistral_reply("answer"))
        provider = make_provider(MistralProvider, recorder, keys(mistral="ms-key"))

        assert await provider.send_text_only("Hello") == "answer"

        assert recorder.requests[-1].headers["authorization"] == "Bearer ms-key"
        payload = recorder.last_json
        assert payload["messages"] == [{"role": "user", "content": "Hello"}]
        assert payload["model"] == "test-model"

    async def test_send_with_document_never_forwards_the_document(self):
        """Test the document bytes are dropped and the disclaimer is sent instead."""
        recorder = RecordingTransport(mistral_reply("answer"))
        provider = make_provider(MistralProvider, recorder, keys(mistral="ms-key"))

        result = await provider.send_with_document("Analyze this", PDF_BASE64, media_type="application/pdf")

        assert result == "answer"
        assert len(recorder.requests) == 1
        body = recorder.requests[-1].content.decode()
        assert PDF_BASE64 not in body
        message = recorder.last_json["messages"][0]["content"]
        assert message == f"Analyze this\n\n{NO_DOCUMENT_DISCLAIMER}"


class TestProviderErrors:
    async def test_missing_api_key_makes_no_request(self):
        """Test an empty key fails before any HTTP call."""
        recorder = RecordingTransport(claude_reply("unused"))
        provider = make_provider(ClaudeProvider, recorder, keys(claude=""))

        with pytest.raises(ProviderKeyMissingError) as exc_info:
            await provider.send_with_document("Analyze this", PDF_BASE64)

        assert exc_info.value.provider == "claude"
        assert recorder.requests == []

    async def test_non_2xx_status(self):
        """Test an error status is reported with its code."""
        recorder = RecordingTransport(lambda request: httpx.Response(529, json={"error": "overloaded"}))
        provider = make_provider(ClaudeProvider, recorder, keys(claude="sk-claude"))

        with pytest.raises(ProviderRequestFailedError) as exc_info:
            await provider.send_text_only("Hello")

        assert exc_info.value.status_code == 529
        assert exc_info.value.provider == "claude"

    async def test_timeout(self):
        """Test a timeout is reported without a status code."""

        def respond(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = make_provider(MistralProvider, RecordingTransport(respond), keys(mistral="ms-key"))

        with pytest.raises(ProviderRequestFailedError) as exc_info:
            await provider.send_text_only("Hello")

        assert exc_info.value.status_code is None

    async def test_non_json_body(self):
        """Test a 200 reply that is not JSON is reported as malformed."""
        recorder = RecordingTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        provider = make_provider(GeminiProvider, recorder, keys(gemini="gm-key"))

        with pytest.raises(ProviderResponseMalformedError):
            await provider.send_text_only("Hello")

    async def test_key_is_read_on_every_call(self):
        """Test adapters ask the key source each time instead of caching the key."""

        class RotatingKeys:
            def __init__(self):
                self.values = iter(["first-key", "second-key"])

            async def get_api_key(self, provider: AIProviderName) -> str:
                return next(self.values)

        recorder = RecordingTransport(mistral_reply("answer"))
        provider = MistralProvider(
            key_source=RotatingKeys(), model="m", api_url="https://ai.test/chat", transport=recorder.transport
        )

        await provider.send_text_only("one")
        await provider.send_text_only("two")

        assert [r.headers["authorization"] for r in recorder.requests] == ["Bearer first-key", "Bearer second-key"]


class TestAIProviderFactory:
    @pytest.mark.parametrize(
        "name, expected_class",
        [
            (AIProviderName.CLAUDE, ClaudeProvider),
            (AIProviderName.GEMINI, GeminiProvider),
            (AIProviderName.MISTRAL, MistralProvider),
        ],
    )
    def test_create(self, test_settings, name, expected_class):
        """Test each provider name maps to its adapter configured from settings."""
        provider = AIProviderFactory(test_settings).create(name, key_source=keys())

        assert isinstance(provider, expected_class)
        assert provider.model == getattr(test_settings, f"{name.name}_MODEL")
        assert provider.api_url == getattr(test_settings, f"{name.name}_API_URL")
        assert provider.timeout == test_settings.AI_REQUEST_TIMEOUT
