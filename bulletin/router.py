"""
Bulletin Board API — Event Router
===================================

What:  Classifies an inbound event into exactly one handler and turns the
       outcome, success or failure, into a response envelope.
How:   A declarative table of Route(method, template, handler) entries is
       compiled to regexes once. Events are resolved by route key first,
       then by method + path. Every handler runs inside one safety net.
Who:   bulletin.lambda_handler (serverless) and bulletin.main (HTTP) both
       call EventRouter.dispatch(event, container).

Inbound conventions (both resolve against the same table):

    1. Route key   {"routeKey": "GET /posts/{id}", "pathParameters": {"id": "..."}}
    2. Method+path {"httpMethod": "GET", "path": "/posts/..."}
                   {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/posts/..."}

    routeKey "$default" (or any key not in the table) falls through to 2.

Outcome mapping:
    handler envelope       → returned as is
    no matching route      → 404 {"error": "Not Found"}
    NotFoundError          → 404 {"error": "Not found"}
    ValidationError        → 400 {"error": <message>}
    anything else          → 500 {"error": "Server Error"} (logged with traceback)
"""

import base64
import json
import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import unquote

from bulletin.envelope import (
    Envelope,
    entity_not_found,
    error_envelope,
    route_not_found,
    server_error,
)
from bulletin.exceptions import BulletinError, NotFoundError, ValidationError
from bulletin.logging_config import request_id_var

logger = logging.getLogger(__name__)

# {name} or {name:type}
_PARAM_RE = re.compile(r"\{(\w+)(?::(\w+))?\}")

CONVERTERS: Dict[str, Callable[[str], Any]] = {
    "str": str,
    "int": int,
    "uuid": uuid.UUID,
}


# ══════════════════════════════════════════════════════════════════════════
# Request passed to handlers
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class RouteRequest:
    """
    What a handler gets to see of the inbound event.

    `params` holds converted path parameters. The body is parsed on demand
    by `json()`, so GET handlers never touch it.
    """

    params: Dict[str, Any]
    event: Dict[str, Any]
    request_id: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def raw_body(self) -> Optional[str]:
        body = self.event.get("body")
        if body is None:
            return None
        if self.event.get("isBase64Encoded"):
            return base64.b64decode(body).decode("utf-8")
        return body

    def json(self) -> Any:
        """
        Parse the body as JSON.

        A missing or empty body parses to {}. Malformed JSON raises
        json.JSONDecodeError, which the router renders as a generic 500.
        """
        raw = self.raw_body
        if raw is None or not raw.strip():
            return {}
        return json.loads(raw)


Handler = Callable[[RouteRequest, Any], Awaitable[Envelope]]


# ══════════════════════════════════════════════════════════════════════════
# Route table entries
# ══════════════════════════════════════════════════════════════════════════

class Route:
    """
    One (method, path template) → handler entry.

    >>> Route("GET", "/posts/{id:uuid}", handler).key
    'GET /posts/{id}'
    """

    def __init__(self, method: str, template: str, handler: Handler):
        self.method = method.upper()
        self.template = template
        self.handler = handler
        self.pattern, self.converters = self._compile(template)
        self.key = f"{self.method} {_PARAM_RE.sub(lambda m: '{' + m.group(1) + '}', template)}"

    @staticmethod
    def _compile(template: str) -> Tuple["re.Pattern[str]", Dict[str, Callable[[str], Any]]]:
        regex = "^"
        converters: Dict[str, Callable[[str], Any]] = {}
        pos = 0
        for m in _PARAM_RE.finditer(template):
            name, type_name = m.group(1), m.group(2) or "str"
            if type_name not in CONVERTERS:
                raise ValueError(f"Unknown path parameter type '{type_name}' in {template}")
            regex += re.escape(template[pos:m.start()])
            regex += f"(?P<{name}>[^/]+)"
            converters[name] = CONVERTERS[type_name]
            pos = m.end()
        regex += re.escape(template[pos:]) + "$"
        return re.compile(regex), converters

    @property
    def param_names(self) -> List[str]:
        return list(self.converters)

    def match(self, path: str) -> Optional[Dict[str, str]]:
        m = self.pattern.match(path)
        if m is None:
            return None
        return {name: unquote(value) for name, value in m.groupdict().items()}

    def convert(self, raw: Dict[str, str]) -> Dict[str, Any]:
        """
        Apply the typed converters.

        Raises:
            ValidationError: A parameter is missing or not of its declared type.
        """
        params: Dict[str, Any] = {}
        for name, converter in self.converters.items():
            value = raw.get(name)
            if value is None:
                raise ValidationError(message=f"Missing path parameter: {name}", fields=[name])
            try:
                params[name] = converter(value)
            except (TypeError, ValueError):
                raise ValidationError(
                    message=f"Invalid path parameter: {name}",
                    fields=[name],
                    context={"value": value},
                ) from None
        return params

    def __repr__(self) -> str:
        return f"Route({self.key!r})"


# ── Event field extraction ────────────────────────────────────────────────

def event_method(event: Dict[str, Any]) -> Optional[str]:
    method = event.get("httpMethod") or (
        (event.get("requestContext") or {}).get("http") or {}
    ).get("method")
    return method.upper() if method else None


def event_path(event: Dict[str, Any]) -> Optional[str]:
    path = event.get("rawPath") or event.get("path")
    if not path:
        return None
    if len(path) > 1 and path.endswith("/"):
        path = path.rstrip("/") or "/"
    return path


def event_headers(event: Dict[str, Any]) -> Dict[str, str]:
    return {str(k).lower(): v for k, v in (event.get("headers") or {}).items()}


def event_request_id(event: Dict[str, Any], headers: Dict[str, str]) -> str:
    return (
        headers.get("x-request-id")
        or (event.get("requestContext") or {}).get("requestId")
        or str(uuid.uuid4())[:8]
    )


# ══════════════════════════════════════════════════════════════════════════
# Router
# ══════════════════════════════════════════════════════════════════════════

class EventRouter:
    """
    Resolves events against a route table and runs the matching handler.

    The container (bulletin.container.AppContainer) is passed through to
    handlers untouched; the router itself holds no process state beyond the
    compiled table.
    """

    def __init__(self, routes: Sequence[Route]):
        self.routes: List[Route] = list(routes)
        self._by_key: Dict[str, Route] = {}
        for route in self.routes:
            if route.key in self._by_key:
                raise ValueError(f"Duplicate route: {route.key}")
            self._by_key[route.key] = route

    @property
    def keys(self) -> List[str]:
        return [route.key for route in self.routes]

    def resolve(self, event: Dict[str, Any]) -> Optional[Tuple[Route, Dict[str, str]]]:
        """
        Find the route for `event` and its raw (unconverted) path parameters.

        Returns None when nothing matches.
        """
        path = event_path(event)

        route_key = event.get("routeKey")
        if route_key and route_key != "$default":
            route = self._by_key.get(route_key)
            if route is not None:
                raw = {k: str(v) for k, v in (event.get("pathParameters") or {}).items()}
                if all(name in raw for name in route.param_names):
                    return route, raw
                if path is not None:
                    from_path = route.match(path)
                    if from_path is not None:
                        return route, from_path
                return route, raw

        method = event_method(event)
        if method is None or path is None:
            return None

        for route in self.routes:
            if route.method != method:
                continue
            raw = route.match(path)
            if raw is not None:
                return route, raw
        return None

    async def dispatch(self, event: Dict[str, Any], container: Any) -> Envelope:
        """
        Produce exactly one envelope for `event`. Never raises.
        """
        start_time = time.time()
        headers = event_headers(event)
        request_id = event_request_id(event, headers)
        token = request_id_var.set(request_id)
        method = event_method(event) or "-"
        path = event_path(event) or event.get("routeKey") or "-"
        route_key = None

        try:
            try:
                resolved = self.resolve(event)
                if resolved is None:
                    envelope = route_not_found()
                else:
                    route, raw_params = resolved
                    route_key = route.key
                    request = RouteRequest(
                        params=route.convert(raw_params),
                        event=event,
                        request_id=request_id,
                        headers=headers,
                    )
                    envelope = await route.handler(request, container)
            except NotFoundError as e:
                logger.info("Not found: %s", e.message)
                envelope = entity_not_found()
            except ValidationError as e:
                logger.warning("Validation error: %s", e.message)
                envelope = error_envelope(400, e.message)
            except BulletinError as e:
                logger.error("%s: %s | Context: %s", type(e).__name__, e.message, e.context)
                envelope = server_error()
            except Exception as e:
                logger.exception("Unhandled error in %s: %s", route_key or path, str(e))
                envelope = server_error()

            duration_ms = (time.time() - start_time) * 1000
            logger.info(
                "%s %s → %d (%.0fms) route=%s",
                method,
                path,
                envelope["statusCode"],
                duration_ms,
                route_key or "-",
            )
            return envelope
        finally:
            request_id_var.reset(token)
