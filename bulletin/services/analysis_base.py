"""
Bulletin Board API — Abstract Analysis Provider Interface
===========================================================

What:  Contract for the vendor that answers POST /analyze, plus the reply
       post-processing shared by every provider.
How:   Concrete providers (OpenAIAnalysisService, GeminiAnalysisService)
       implement `complete()`; `analyze()` applies the single-image rule and
       unwraps a fenced reply.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

# ```json\n{...}\n```  →  {...}
# Opening fence may carry a language tag; the closing fence may be missing.
_OPENING_FENCE = re.compile(r"^```[\w+.-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```\s*$")


def strip_code_fence(text: str) -> str:
    """
    Remove a Markdown code-fence wrapper from a model reply.

    Only replies that start with ``` are touched; anything else is returned
    unchanged. The unwrapped text is trimmed.

    >>> strip_code_fence('```json\\n{"a":1}\\n```')
    '{"a":1}'
    """
    if text is None:
        return ""
    stripped = text.strip()
    if not stripped.startswith("```"):
        return text
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


class AnalysisProvider(ABC):
    """
    Abstract interface for multimodal text/image analysis.

    Contract:
        - complete() sends one prompt and at most one image and returns the
          raw reply text
        - Provider errors are wrapped in AnalysisError
        - No retries: one call per request
    """

    name: str = "abstract"

    async def analyze(self, prompt: str, image_urls: Optional[Sequence[str]] = None) -> str:
        """
        Ask the model about `prompt` and, if given, the first image URL.

        Additional image URLs are ignored. The reply is returned verbatim
        apart from code-fence unwrapping; it is not parsed or validated.
        """
        image_url = image_urls[0] if image_urls else None
        if image_urls and len(image_urls) > 1:
            logger.debug("Ignoring %d extra image URL(s)", len(image_urls) - 1)
        raw = await self.complete(prompt, image_url)
        return strip_code_fence(raw)

    @abstractmethod
    async def complete(self, prompt: str, image_url: Optional[str] = None) -> str:
        """
        Send one request to the model.

        Args:
            prompt:    Instruction text.
            image_url: Publicly reachable image, or None for text-only.

        Returns:
            The reply text of the first choice ("" when the model sent none).

        Raises:
            AnalysisError: The vendor call failed.
        """
        ...

    async def aclose(self) -> None:
        """Release vendor client resources. Default: nothing to release."""
        return None
