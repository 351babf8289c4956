# Routes package init
"""
Bulletin Board API — Route Table
==================================

What:  The declarative (method, path) → handler table and the router built
       from it.
How:   Handlers are plain async functions `(RouteRequest, AppContainer) ->
       Envelope`; they validate, call one service and build the envelope.
       Failures are left to the router's safety net.

Route Inventory:
    POST /upload                 upload.upload
    GET  /posts                  posts.list_posts
    POST /posts                  posts.create_post
    GET  /posts/{id}             posts.get_post
    POST /responses              responses.create_response
    GET  /posts/{id}/responses   responses.list_responses
    POST /analyze                analyze.analyze

GET /health exists on the HTTP surface only (bulletin.routes.health).
"""

from bulletin.router import EventRouter, Route
from bulletin.routes import analyze, posts, responses, upload

ROUTES = [
    Route("POST", "/upload", upload.upload),
    Route("GET", "/posts", posts.list_posts),
    Route("POST", "/posts", posts.create_post),
    Route("GET", "/posts/{id:uuid}", posts.get_post),
    Route("POST", "/responses", responses.create_response),
    Route("GET", "/posts/{id:uuid}/responses", responses.list_responses),
    Route("POST", "/analyze", analyze.analyze),
]


def create_router() -> EventRouter:
    return EventRouter(ROUTES)
