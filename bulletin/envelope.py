"""
Bulletin Board API — Response Envelope
========================================

What:  Builds the fixed response shape every operation returns.
How:   Pure functions, no I/O. Bodies are serialized here so handlers can
       return pydantic models, lists of them, dicts or raw text.

Envelope:
    {
        "statusCode": 200,
        "headers": {"Access-Control-Allow-Origin": "*"},
        "body": "<serialized JSON or raw text>"
    }

Error bodies are always {"error": "<string>"}.
"""

import json
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder

from bulletin.schemas.common import ErrorResponse

# Any origin may call the API; no credentials are involved.
CORS_HEADERS: Dict[str, str] = {"Access-Control-Allow-Origin": "*"}

Envelope = Dict[str, Any]


def build_envelope(status_code: int, body: str, headers: Optional[Dict[str, str]] = None) -> Envelope:
    merged = dict(CORS_HEADERS)
    if headers:
        merged.update(headers)
    return {"statusCode": status_code, "headers": merged, "body": body}


def json_envelope(status_code: int, payload: Any) -> Envelope:
    """
    Serialize `payload` as JSON and wrap it.

    UUIDs become strings and datetimes become ISO-8601 (jsonable_encoder).
    """
    body = json.dumps(jsonable_encoder(payload))
    return build_envelope(status_code, body, {"Content-Type": "application/json"})


def text_envelope(status_code: int, text: str) -> Envelope:
    """Wrap raw text without re-encoding it (model output is passed through)."""
    return build_envelope(status_code, text or "", {"Content-Type": "text/plain; charset=utf-8"})


def error_envelope(status_code: int, message: str) -> Envelope:
    return json_envelope(status_code, ErrorResponse(error=message))


# ── Canonical error envelopes ─────────────────────────────────────────────
# Exact strings are part of the public contract ("Not Found" vs "Not found").

def route_not_found() -> Envelope:
    return error_envelope(404, "Not Found")


def entity_not_found() -> Envelope:
    return error_envelope(404, "Not found")


def server_error() -> Envelope:
    return error_envelope(500, "Server Error")
