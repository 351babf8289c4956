"""
Bulletin Board API — Application Container
============================================

What:  The process-wide singletons every handler needs, created once and
       torn down once.
How:   `AppContainer.create(settings)` builds the engine, session factory,
       data-access service and both vendor clients; `shutdown()` releases
       them. The router hands the container to each handler.
Who:   Created by bulletin.lambda_handler (lazily, first event) and by the
       FastAPI lifespan in bulletin.main. Tests build one around a SQLite
       engine and fake vendor services.

    AppContainer
    ├── settings          Settings
    ├── variant           SchemaVariant (full | reduced)
    ├── engine            AsyncEngine (connection pool)
    ├── session_factory   async_sessionmaker
    ├── posts             PostService
    ├── media             MediaService (Cloudinary)
    └── analysis          AnalysisProvider (OpenAI | Gemini)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from bulletin.config import Settings
from bulletin.database import create_engine_from_settings, create_session_factory, dispose_engine
from bulletin.services.analysis_base import AnalysisProvider
from bulletin.services.analysis_service import create_analysis_provider
from bulletin.services.media_service import MediaService
from bulletin.services.post_service import PostService
from bulletin.variants import SchemaVariant, get_variant

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    settings: Settings
    variant: SchemaVariant
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    posts: PostService
    media: MediaService
    analysis: AnalysisProvider

    @classmethod
    def create(
        cls,
        settings: Settings,
        engine: Optional[AsyncEngine] = None,
        media: Optional[MediaService] = None,
        analysis: Optional[AnalysisProvider] = None,
    ) -> "AppContainer":
        """
        Build every singleton from `settings`.

        Any component may be passed in ready-made (tests pass a SQLite engine
        and fake vendor services). Vendor clients connect lazily, so creating
        the container performs no network I/O.
        """
        variant = get_variant(settings.schema_variant)
        engine = engine or create_engine_from_settings(settings)
        container = cls(
            settings=settings,
            variant=variant,
            engine=engine,
            session_factory=create_session_factory(engine),
            posts=PostService(variant),
            media=media or MediaService(settings),
            analysis=analysis or create_analysis_provider(settings),
        )
        logger.info(
            "Container ready (variant=%s, analysis=%s)",
            variant.name,
            getattr(container.analysis, "name", type(container.analysis).__name__),
        )
        return container

    async def shutdown(self) -> None:
        """Close the vendor clients, then the connection pool."""
        try:
            await self.analysis.aclose()
        except Exception as e:
            logger.warning("Error closing analysis client: %s", str(e))
        await dispose_engine(self.engine)
