"""
Bulletin Board API — Envelope Tests
=====================================

What:  Shape of every envelope the router can return.
"""

import json
import uuid
from datetime import datetime, timezone

from bulletin.envelope import (
    entity_not_found,
    error_envelope,
    json_envelope,
    route_not_found,
    server_error,
    text_envelope,
)
from bulletin.schemas.listing import FullResponseOut


class TestEnvelope:

    def test_cors_header_on_every_envelope(self):
        for envelope in (
            json_envelope(200, []),
            text_envelope(200, "hi"),
            error_envelope(400, "bad"),
            route_not_found(),
            entity_not_found(),
            server_error(),
        ):
            assert envelope["headers"]["Access-Control-Allow-Origin"] == "*"
            assert set(envelope) == {"statusCode", "headers", "body"}

    def test_models_serialize_uuid_and_datetime_as_strings(self):
        reply = FullResponseOut(
            id=uuid.UUID("00000000-0000-0000-0000-000000000001"),
            post_id=uuid.UUID("00000000-0000-0000-0000-000000000002"),
            nickname="sam",
            content="hi",
            created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        )
        body = json.loads(json_envelope(201, [reply])["body"])
        created_at = body[0].pop("created_at")

        # Offset spelling ("Z" or "+00:00") depends on the pydantic release
        assert datetime.fromisoformat(created_at.replace("Z", "+00:00")) == datetime(
            2024, 5, 1, 12, 0, tzinfo=timezone.utc
        )
        assert body == [{
            "id": "00000000-0000-0000-0000-000000000001",
            "post_id": "00000000-0000-0000-0000-000000000002",
            "nickname": "sam",
            "content": "hi",
        }]

    def test_text_is_not_reencoded(self):
        envelope = text_envelope(200, '{"a":1}')
        assert envelope["body"] == '{"a":1}'

    def test_error_strings(self):
        assert json.loads(route_not_found()["body"]) == {"error": "Not Found"}
        assert json.loads(entity_not_found()["body"]) == {"error": "Not found"}
        assert json.loads(server_error()["body"]) == {"error": "Server Error"}
        assert server_error()["statusCode"] == 500
