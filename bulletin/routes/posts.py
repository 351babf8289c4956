"""
Bulletin Board API — Listing Handlers
=======================================

    GET  /posts        → 200 newest 20 listings
    POST /posts        → 201 created listing
    GET  /posts/{id}   → 200 listing | 404 {"error": "Not found"}

Each handler opens one session scope, makes one PostService call and wraps
the result. Body fields depend on the configured schema variant.
"""

import logging

from bulletin.database import session_scope
from bulletin.envelope import Envelope, json_envelope
from bulletin.router import RouteRequest
from bulletin.routes.validation import parse_body

logger = logging.getLogger(__name__)


async def list_posts(request: RouteRequest, container) -> Envelope:
    async with session_scope(container.session_factory) as db:
        posts = await container.posts.list_posts(db)
    return json_envelope(200, posts)


async def create_post(request: RouteRequest, container) -> Envelope:
    data = parse_body(container.variant.post_create, request)
    async with session_scope(container.session_factory) as db:
        post = await container.posts.create_post(db, data)
    return json_envelope(201, post)


async def get_post(request: RouteRequest, container) -> Envelope:
    async with session_scope(container.session_factory) as db:
        post = await container.posts.get_post(db, request.params["id"])
    return json_envelope(200, post)
