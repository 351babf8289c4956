"""
Bulletin Board API — Analysis Provider Tests (Mocked)
=======================================================

What:  Reply unwrapping and outbound request shape for both providers.
How:   Vendor SDK clients are replaced by mocks; no network access.

What we test:
    ✅ Fenced replies are unwrapped, plain replies pass through
    ✅ Only the first image URL is sent
    ✅ OpenAI message shape (text part + image_url part, detail "high")
    ✅ Vendor failures become AnalysisError
    ✅ Gemini receives the image inline with its MIME type
    ✅ ANALYSIS_PROVIDER picks the provider class
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError

from bulletin.exceptions import AnalysisError
from bulletin.services.analysis_base import strip_code_fence
from bulletin.services.analysis_service import create_analysis_provider
from bulletin.services.gemini_service import GeminiAnalysisService
from bulletin.services.openai_service import OpenAIAnalysisService, build_messages


def _openai_reply(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _openai_client(reply=None, error=None):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=reply, side_effect=error)
    client.close = AsyncMock()
    return client


class TestStripCodeFence:

    def test_json_fence(self):
        assert strip_code_fence('```json\n{"a":1}\n```') == '{"a":1}'

    def test_fence_without_language(self):
        assert strip_code_fence("```\nhello\n```") == "hello"

    def test_surrounding_whitespace(self):
        assert strip_code_fence('  \n```json\n{"a": 1}\n```\n  ') == '{"a": 1}'

    def test_missing_closing_fence(self):
        assert strip_code_fence('```json\n{"a":1}') == '{"a":1}'

    def test_plain_text_untouched(self):
        assert strip_code_fence("A wooden chair.") == "A wooden chair."

    def test_inner_fence_untouched(self):
        text = "Here you go:\n```json\n{}\n```"
        assert strip_code_fence(text) == text

    def test_none_becomes_empty(self):
        assert strip_code_fence(None) == ""


class TestBuildMessages:

    def test_text_only(self):
        messages = build_messages("Describe it", None)
        assert messages == [{"role": "user", "content": [{"type": "text", "text": "Describe it"}]}]

    def test_with_image(self):
        messages = build_messages("Describe it", "https://img/1.jpg")
        content = messages[0]["content"]
        assert content[1] == {
            "type": "image_url",
            "image_url": {"url": "https://img/1.jpg", "detail": "high"},
        }


class TestOpenAIAnalysisService:

    @pytest.mark.asyncio
    async def test_only_first_image_is_attached(self, test_settings):
        client = _openai_client(reply=_openai_reply("ok"))
        service = OpenAIAnalysisService(test_settings, client=client)

        await service.analyze("What is this?", ["https://img/1.jpg", "https://img/2.jpg"])

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        content = kwargs["messages"][0]["content"]
        image_parts = [part for part in content if part["type"] == "image_url"]
        assert len(image_parts) == 1
        assert image_parts[0]["image_url"]["url"] == "https://img/1.jpg"

    @pytest.mark.asyncio
    async def test_fenced_reply_is_unwrapped(self, test_settings):
        client = _openai_client(reply=_openai_reply('```json\n{"category": "bike"}\n```'))
        service = OpenAIAnalysisService(test_settings, client=client)

        assert await service.analyze("Categorize", ["https://img/1.jpg"]) == '{"category": "bike"}'

    @pytest.mark.asyncio
    async def test_empty_reply(self, test_settings):
        client = _openai_client(reply=_openai_reply(None))
        service = OpenAIAnalysisService(test_settings, client=client)

        assert await service.analyze("Anything?") == ""

    @pytest.mark.asyncio
    async def test_vendor_failure_raises_analysis_error(self, test_settings):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = _openai_client(error=APIConnectionError(request=request))
        service = OpenAIAnalysisService(test_settings, client=client)

        with pytest.raises(AnalysisError):
            await service.analyze("What is this?", ["https://img/1.jpg"])
        client.chat.completions.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_aclose_closes_created_client(self, test_settings):
        client = _openai_client(reply=_openai_reply("ok"))
        service = OpenAIAnalysisService(test_settings, client=client)
        await service.aclose()
        client.close.assert_awaited_once()


class TestGeminiAnalysisService:

    def _service(self, test_settings, model, handler):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        with patch("bulletin.services.gemini_service.genai"):
            return GeminiAnalysisService(test_settings, model=model, http_client=http_client)

    @pytest.mark.asyncio
    async def test_first_image_sent_inline(self, test_settings):
        fetched = []

        def handler(request):
            fetched.append(str(request.url))
            return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})

        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=SimpleNamespace(text="```\nA bike\n```"))
        service = self._service(test_settings, model, handler)

        result = await service.analyze("What is this?", ["https://img/1.png", "https://img/2.png"])

        assert result == "A bike"
        assert fetched == ["https://img/1.png"]
        parts = model.generate_content_async.call_args.args[0]
        assert parts == ["What is this?", {"mime_type": "image/png", "data": b"\x89PNG"}]
        await service.aclose()

    @pytest.mark.asyncio
    async def test_image_fetch_failure_raises_analysis_error(self, test_settings):
        model = MagicMock()
        model.generate_content_async = AsyncMock()
        service = self._service(test_settings, model, lambda request: httpx.Response(404))

        with pytest.raises(AnalysisError):
            await service.analyze("What is this?", ["https://img/missing.png"])
        model.generate_content_async.assert_not_awaited()
        await service.aclose()


class TestProviderSelection:

    def test_default_is_openai(self, test_settings):
        assert isinstance(create_analysis_provider(test_settings), OpenAIAnalysisService)

    def test_gemini(self, test_settings):
        settings = test_settings.model_copy(update={"analysis_provider": "gemini"})
        with patch("bulletin.services.gemini_service.genai"):
            assert isinstance(create_analysis_provider(settings), GeminiAnalysisService)
