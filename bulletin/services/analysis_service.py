"""
Bulletin Board API — Analysis Provider Selection
==================================================

What:  Builds the AnalysisProvider named by ANALYSIS_PROVIDER.
When:  Once per process, from AppContainer.create().

    openai  → OpenAIAnalysisService (default)
    gemini  → GeminiAnalysisService
"""

import logging

from bulletin.config import Settings
from bulletin.services.analysis_base import AnalysisProvider, strip_code_fence
from bulletin.services.gemini_service import GeminiAnalysisService
from bulletin.services.openai_service import OpenAIAnalysisService

logger = logging.getLogger(__name__)

PROVIDERS = {
    "openai": OpenAIAnalysisService,
    "gemini": GeminiAnalysisService,
}

__all__ = ["AnalysisProvider", "create_analysis_provider", "strip_code_fence", "PROVIDERS"]


def create_analysis_provider(settings: Settings) -> AnalysisProvider:
    try:
        provider_cls = PROVIDERS[settings.analysis_provider]
    except KeyError:
        raise ValueError(
            f"Unknown analysis provider '{settings.analysis_provider}'. Known: {sorted(PROVIDERS)}"
        ) from None
    logger.info("Using analysis provider: %s", settings.analysis_provider)
    return provider_cls(settings)
