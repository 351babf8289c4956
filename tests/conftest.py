"""
Bulletin Board API — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Data-access tests run against an in-memory SQLite database (aiosqlite,
       one shared connection via StaticPool, foreign keys enforced). Vendor
       services are replaced by mocks; no test touches the network.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── test_settings / reduced_settings: Settings for each schema variant
    ├── engine / reduced_engine: SQLite engines with the variant's tables
    ├── fake_media / fake_analysis: Mocked vendor services
    ├── container / reduced_container: AppContainer wired to the above
    ├── mock_db_session: AsyncSession mock for storage failures
    ├── router: EventRouter over the production route table
    ├── make_event: Builds API Gateway style events
    └── test_client: HTTPX AsyncClient for the FastAPI surface
"""

import json
import os
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any bulletin import: bulletin.config builds its singleton on import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["OPENAI_API_KEY"] = "test-key-not-real"
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from bulletin.config import Settings  # noqa: E402
from bulletin.container import AppContainer  # noqa: E402
from bulletin.routes import create_router  # noqa: E402
from bulletin.services.analysis_base import AnalysisProvider  # noqa: E402
from bulletin.services.media_service import MediaService  # noqa: E402
from bulletin.variants import FULL, REDUCED  # noqa: E402


SQLITE_URL = "sqlite+aiosqlite://"


def _make_settings(variant: str) -> Settings:
    return Settings(
        _env_file=None,
        database_url=SQLITE_URL,
        schema_variant=variant,
        openai_api_key="test-key-not-real",
        log_level="WARNING",
    )


async def _make_engine(variant):
    """In-memory SQLite engine with `variant`'s tables created."""
    engine = create_async_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite ignores foreign keys unless asked
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(variant.metadata.create_all)
    return engine


# ══════════════════════════════════════════════════════════════════════════
# Settings & Database
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings() -> Settings:
    return _make_settings("full")


@pytest.fixture
def reduced_settings() -> Settings:
    return _make_settings("reduced")


@pytest_asyncio.fixture
async def engine():
    engine = await _make_engine(FULL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def reduced_engine():
    engine = await _make_engine(REDUCED)
    yield engine
    await engine.dispose()


# ══════════════════════════════════════════════════════════════════════════
# Vendor Fakes
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_media():
    """
    MediaService stand-in.

    Usage:
        fake_media.upload.return_value = {"secure_url": "...", "public_id": "..."}
    """
    media = MagicMock(spec=MediaService)
    media.upload = AsyncMock(
        return_value={
            "public_id": "items/abc123",
            "secure_url": "https://res.cloudinary.com/test-cloud/image/upload/items/abc123.jpg",
            "format": "jpg",
            "bytes": 2048,
        }
    )
    media.delete = AsyncMock(return_value={"result": "ok"})
    return media


@pytest.fixture
def fake_analysis():
    analysis = MagicMock(spec=AnalysisProvider)
    analysis.name = "openai"
    analysis.analyze = AsyncMock(return_value='{"category": "furniture"}')
    analysis.aclose = AsyncMock()
    return analysis


# ══════════════════════════════════════════════════════════════════════════
# Container, Router & Clients
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def container(test_settings, engine, fake_media, fake_analysis) -> AppContainer:
    return AppContainer.create(
        test_settings, engine=engine, media=fake_media, analysis=fake_analysis
    )


@pytest.fixture
def reduced_container(reduced_settings, reduced_engine, fake_media, fake_analysis) -> AppContainer:
    return AppContainer.create(
        reduced_settings, engine=reduced_engine, media=fake_media, analysis=fake_analysis
    )


@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession for tests that need a storage failure, not a database.

    Usage:
        mock_db_session.execute = AsyncMock(side_effect=OperationalError(...))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def router():
    return create_router()


@pytest.fixture
def make_event():
    """
    Build a REST API (v1) style event.

    Usage:
        event = make_event("POST", "/posts", {"title": "Desk"})
        event = make_event("GET", "/posts/abc", raw_body="{not json")
    """

    def _make(
        method: str,
        path: str,
        body: Any = None,
        raw_body: Optional[str] = None,
        **extra: Any,
    ) -> Dict[str, Any]:
        event: Dict[str, Any] = {
            "httpMethod": method,
            "path": path,
            "headers": {"content-type": "application/json"},
            "body": raw_body if raw_body is not None else (
                json.dumps(body) if body is not None else None
            ),
            "isBase64Encoded": False,
        }
        event.update(extra)
        return event

    return _make


@pytest.fixture
def full_post_body() -> Dict[str, Any]:
    return {
        "title": "Free armchair",
        "description": "Slightly worn, very comfy",
        "image_url": "https://res.cloudinary.com/test-cloud/image/upload/items/chair.jpg",
        "street_name": "Smith St",
        "suburb": "Fitzroy",
        "postcode": "3065",
        "category": "furniture",
        "nickname": "sam",
    }


@pytest_asyncio.fixture
async def test_client(container):
    """
    HTTPX AsyncClient talking to a FastAPI app built around `container`.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from bulletin.main import create_app

    app = create_app(container=container)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
