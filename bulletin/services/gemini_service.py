"""
Bulletin Board API — Google Gemini Analysis Provider
======================================================

What:  AnalysisProvider backed by Google Gemini (google-generativeai SDK).
How:   Gemini takes image bytes rather than URLs, so the first image is
       downloaded with httpx and sent inline next to the prompt.
When:  ANALYSIS_PROVIDER=gemini.

Flow:
    1. (optional) GET image_url → bytes + content type
    2. model.generate_content_async([prompt, {"mime_type", "data"}])
    3. return response.text
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional

import google.generativeai as genai
import httpx

from bulletin.config import Settings
from bulletin.exceptions import AnalysisError
from bulletin.services.analysis_base import AnalysisProvider

logger = logging.getLogger(__name__)

# Fallback when the image host sends no usable Content-Type
DEFAULT_IMAGE_MIME = "image/jpeg"


class GeminiAnalysisService(AnalysisProvider):
    """
    Gemini implementation of the analysis contract.

    The SDK keeps its API key in module-level state, so `genai.configure`
    runs once here; the GenerativeModel and the httpx client are reused
    across requests.
    """

    name = "gemini"

    def __init__(
        self,
        settings: Settings,
        model: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if settings.gemini_api_key:
            genai.configure(api_key=settings.gemini_api_key)
        self.model_name = settings.gemini_model
        self.model = model or genai.GenerativeModel(settings.gemini_model)
        self._http = http_client
        logger.info("GeminiAnalysisService initialized with model=%s", self.model_name)

    @property
    def http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(follow_redirects=True)
        return self._http

    async def _fetch_image(self, image_url: str) -> Dict[str, Any]:
        """Download one image and return it as an inline Gemini part."""
        response = await self.http.get(image_url)
        response.raise_for_status()
        mime_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            mime_type = DEFAULT_IMAGE_MIME
        return {"mime_type": mime_type, "data": response.content}

    async def complete(self, prompt: str, image_url: Optional[str] = None) -> str:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        logger.info(
            "[%s] Sending analysis request (model=%s, image=%s)",
            request_id,
            self.model_name,
            "yes" if image_url else "no",
        )

        try:
            parts: list = [prompt]
            if image_url:
                parts.append(await self._fetch_image(image_url))
            response = await self.model.generate_content_async(parts)
            text = response.text or ""
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "[%s] Gemini call failed after %.0fms: %s",
                request_id,
                duration_ms,
                str(e),
            )
            raise AnalysisError(
                message="Image analysis failed",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "[%s] Gemini analysis completed in %.0fms, %d chars",
            request_id,
            duration_ms,
            len(text),
        )
        return text

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
