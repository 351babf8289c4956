"""
Bulletin Board API — OpenAI Analysis Provider
===============================================

What:  AnalysisProvider backed by OpenAI chat completions (gpt-4o by default).
How:   Builds one user message whose content holds a text part and, when an
       image is given, one `image_url` part; awaits a single completion and
       returns the first choice's text.
When:  Default provider (ANALYSIS_PROVIDER=openai).

Outbound message shape:
    [{"role": "user",
      "content": [{"type": "text", "text": <prompt>},
                  {"type": "image_url",
                   "image_url": {"url": <first image>, "detail": "high"}}]}]
"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from bulletin.config import Settings
from bulletin.exceptions import AnalysisError
from bulletin.services.analysis_base import AnalysisProvider

logger = logging.getLogger(__name__)


def build_messages(prompt: str, image_url: Optional[str], detail: str = "high") -> List[Dict[str, Any]]:
    """Chat payload for one prompt and at most one image."""
    content: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]
    if image_url:
        content.append({
            "type": "image_url",
            "image_url": {"url": image_url, "detail": detail},
        })
    return [{"role": "user", "content": content}]


class OpenAIAnalysisService(AnalysisProvider):
    """
    OpenAI chat-completions implementation.

    The AsyncOpenAI client is created on first use and then reused for the
    life of the process. The SDK retry loop is turned off (max_retries=0):
    a failure reaches the caller on the first attempt.
    """

    name = "openai"

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.model = settings.openai_model
        self.image_detail = settings.openai_image_detail
        self.api_key = settings.openai_api_key
        self._client = client
        logger.info("OpenAIAnalysisService initialized with model=%s", self.model)

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key or None, max_retries=0)
        return self._client

    async def complete(self, prompt: str, image_url: Optional[str] = None) -> str:
        request_id = str(uuid.uuid4())[:8]
        messages = build_messages(prompt, image_url, self.image_detail)
        start_time = time.time()

        logger.info(
            "[%s] Sending analysis request (model=%s, image=%s)",
            request_id,
            self.model,
            "yes" if image_url else "no",
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
            )
        except OpenAIError as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                "[%s] OpenAI call failed after %.0fms: %s",
                request_id,
                duration_ms,
                str(e),
            )
            raise AnalysisError(
                message="Image analysis failed",
                context={"request_id": request_id, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        content = response.choices[0].message.content if response.choices else None
        logger.info(
            "[%s] OpenAI analysis completed in %.0fms, %d chars",
            request_id,
            duration_ms,
            len(content or ""),
        )
        logger.debug("[%s] OpenAI raw response: %s", request_id, response)
        return content or ""

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
