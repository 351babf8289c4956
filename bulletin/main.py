"""
Bulletin Board API — FastAPI Application Factory
==================================================

What:  Serves the same route table as the Lambda entry point over plain HTTP.
How:   Every request except GET /health is converted into an API Gateway
       style event, dispatched through EventRouter, and the resulting
       envelope is turned back into a Response. Status codes, bodies and
       headers are therefore identical on both surfaces.
Who:   uvicorn bulletin.main:app
When:  Local development and container deployments.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:                                            │
    │    GET /health           health.router              │
    │    /{path}  (catch-all)  → event → EventRouter      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging, configuration check, AppContainer.create()
    Shutdown:  AppContainer.shutdown() (vendor clients, connection pool)
"""

import base64
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from bulletin import __version__
from bulletin.config import Settings, settings as default_settings
from bulletin.container import AppContainer
from bulletin.envelope import Envelope, error_envelope, route_not_found
from bulletin.logging_config import setup_logging
from bulletin.middleware.logging import RequestLoggingMiddleware
from bulletin.middleware.request_id import RequestIDMiddleware
from bulletin.routes import create_router, health

logger = logging.getLogger(__name__)

# Methods forwarded to the router. CORS preflights never get here: CORSMiddleware
# answers them first; a plain OPTIONS or HEAD ends as 404 "Not Found".
DISPATCH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# ══════════════════════════════════════════════════════════════════════════
# HTTP ↔ event conversion
# ══════════════════════════════════════════════════════════════════════════

async def request_to_event(request: Request) -> Dict[str, Any]:
    """
    Build a REST-API style event from an HTTP request.

    Bodies that are not valid UTF-8 are passed base64-encoded, as API
    Gateway does for binary payloads.
    """
    raw = await request.body()
    body: Optional[str] = None
    is_base64 = False
    if raw:
        try:
            body = raw.decode("utf-8")
        except UnicodeDecodeError:
            body = base64.b64encode(raw).decode("ascii")
            is_base64 = True

    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params) or None,
        "requestContext": {
            "requestId": getattr(request.state, "request_id", None),
            "http": {"method": request.method, "path": request.url.path},
        },
        "body": body,
        "isBase64Encoded": is_base64,
    }


def envelope_to_response(envelope: Envelope) -> Response:
    return Response(
        content=envelope["body"],
        status_code=envelope["statusCode"],
        headers=envelope["headers"],
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Create the container on startup unless one was injected, and shut down
    only what this lifespan created.
    """
    setup_logging()
    app_settings: Settings = app.state.settings
    logger.info("=" * 60)
    logger.info("Bulletin Board API %s starting up...", __version__)

    # Missing credentials are logged, not fatal: /health still answers
    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    owned = app.state.container is None
    if owned:
        app.state.container = AppContainer.create(app_settings)

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Bulletin Board API shutting down...")
    if owned:
        await app.state.container.shutdown()
        app.state.container = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    container: Optional[AppContainer] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: Pre-built container (tests). When omitted, the lifespan
                   builds one from `settings`.
        settings:  Defaults to the bulletin.config singleton.
    """
    app_settings = settings or (container.settings if container else default_settings)

    app = FastAPI(
        title="Bulletin Board API",
        description="Community listings, replies, image upload and image analysis.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.container = container
    app.state.router = create_router()

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        """Framework-level rejections (405, 404) use the same error envelope as the router."""
        if exc.status_code == 404:
            return envelope_to_response(route_not_found())
        return envelope_to_response(error_envelope(exc.status_code, str(exc.detail)))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Failures outside the router (e.g. reading the body) get the same generic body."""
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Server Error"},
            headers={"Access-Control-Allow-Origin": "*"},
        )

    app.include_router(health.router)

    @app.api_route("/{full_path:path}", methods=DISPATCH_METHODS, include_in_schema=False)
    async def dispatch(request: Request, full_path: str) -> Response:
        event = await request_to_event(request)
        envelope = await request.app.state.router.dispatch(event, request.app.state.container)
        return envelope_to_response(envelope)

    return app


# uvicorn expects `bulletin.main:app` to be importable
app = create_app()
