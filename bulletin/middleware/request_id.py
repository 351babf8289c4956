"""
Bulletin Board API — Request ID Middleware
============================================

What:  Assigns an ID to each HTTP request and returns it in X-Request-ID.
How:   Uses the client's X-Request-ID header when present, otherwise a short
       UUID. The ID is stored in the logging ContextVar and on request.state;
       the catch-all route forwards it into the event as
       requestContext.requestId so the router logs under the same ID.
When:  Outermost application middleware (runs before request logging).
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from bulletin.logging_config import request_id_var


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Take X-Request-ID from the client, or generate one
        2. Bind it for log correlation for the rest of the request
        3. Echo it in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is enough to correlate log lines
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
