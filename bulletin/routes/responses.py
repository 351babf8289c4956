"""
Bulletin Board API — Response (Comment) Handlers
==================================================

    POST /responses              → 201 created response
    GET  /posts/{id}/responses   → 200 responses to one listing, oldest first

Replying to a listing that does not exist is rejected by the foreign key
and answered with the generic 500.
"""

from bulletin.database import session_scope
from bulletin.envelope import Envelope, json_envelope
from bulletin.router import RouteRequest
from bulletin.routes.validation import parse_body


async def create_response(request: RouteRequest, container) -> Envelope:
    data = parse_body(container.variant.response_create, request)
    async with session_scope(container.session_factory) as db:
        response = await container.posts.create_response(db, data)
    return json_envelope(201, response)


async def list_responses(request: RouteRequest, container) -> Envelope:
    async with session_scope(container.session_factory) as db:
        responses = await container.posts.list_responses(db, request.params["id"])
    return json_envelope(200, responses)
