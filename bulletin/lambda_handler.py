"""
Bulletin Board API — Serverless Entry Point
=============================================

What:  `handler(event, context)` for AWS Lambda behind API Gateway (REST or
       HTTP API payloads).
How:   One event loop and one AppContainer per process. The container is
       created on the first event and reused by every later invocation on
       the same warm instance; it is shut down when the process exits.

Deployment:
    handler = bulletin.lambda_handler.handler
"""

import asyncio
import atexit
import logging
from typing import Any, Dict, Optional

from bulletin.config import settings
from bulletin.container import AppContainer
from bulletin.envelope import Envelope, server_error
from bulletin.logging_config import setup_logging
from bulletin.routes import create_router

logger = logging.getLogger(__name__)

setup_logging()

_loop = asyncio.new_event_loop()
_router = create_router()
_container: Optional[AppContainer] = None


def get_container() -> AppContainer:
    global _container
    if _container is None:
        try:
            settings.validate_required_for_production()
        except ValueError as e:
            logger.error("Configuration error: %s", str(e))
        _container = AppContainer.create(settings)
    return _container


async def _dispatch(event: Dict[str, Any]) -> Envelope:
    try:
        container = get_container()
    except Exception as e:
        logger.exception("Container initialization failed: %s", str(e))
        return server_error()
    return await _router.dispatch(event, container)


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """
    Dispatch one API Gateway event and return the response envelope.

    Always returns an envelope; a container that cannot be built yields the
    generic 500 and is retried on the next event.
    """
    return _loop.run_until_complete(_dispatch(event))


@atexit.register
def _shutdown() -> None:
    global _container
    if _container is not None and not _loop.is_closed():
        _loop.run_until_complete(_container.shutdown())
        _container = None
    if not _loop.is_closed():
        _loop.close()
