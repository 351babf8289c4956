"""
Bulletin Board API — Lambda Entry Point Tests
===============================================

What:  handler(event, context) runs the router synchronously on its own
       event loop and returns the envelope.
How:   get_container is patched with a mock container; only routes that
       do not touch the database are exercised here.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

from bulletin import lambda_handler
from bulletin.variants import FULL


def _container():
    container = MagicMock()
    container.variant = FULL
    container.settings.upload_default_folder = "items"
    container.analysis.analyze = AsyncMock(return_value="A red bike")
    container.media.upload = AsyncMock(return_value={"public_id": "items/1", "secure_url": "https://x"})
    return container


class TestLambdaHandler:

    def test_unknown_route(self):
        with patch.object(lambda_handler, "get_container", return_value=_container()):
            envelope = lambda_handler.handler({"httpMethod": "GET", "path": "/missing"}, None)

        assert envelope["statusCode"] == 404
        assert json.loads(envelope["body"]) == {"error": "Not Found"}
        assert envelope["headers"]["Access-Control-Allow-Origin"] == "*"

    def test_http_api_analyze(self):
        container = _container()
        event = {
            "routeKey": "POST /analyze",
            "rawPath": "/analyze",
            "requestContext": {"http": {"method": "POST"}, "requestId": "req-1"},
            "body": json.dumps({"prompt": "What is it?", "file_urls": ["https://img/1.jpg"]}),
        }
        with patch.object(lambda_handler, "get_container", return_value=container):
            envelope = lambda_handler.handler(event, None)

        assert envelope["statusCode"] == 200
        assert envelope["body"] == "A red bike"

    def test_upload_with_folder(self):
        container = _container()
        event = {
            "httpMethod": "POST",
            "path": "/upload",
            "body": json.dumps({"file": "data:image/png;base64,AAAA", "folder": "bikes"}),
        }
        with patch.object(lambda_handler, "get_container", return_value=container):
            envelope = lambda_handler.handler(event, None)

        assert envelope["statusCode"] == 200
        container.media.upload.assert_awaited_once_with("data:image/png;base64,AAAA", folder="bikes")

    def test_container_created_once(self):
        with patch.object(lambda_handler, "_container", None), \
             patch.object(lambda_handler.AppContainer, "create", return_value=MagicMock()) as create:
            first = lambda_handler.get_container()
            second = lambda_handler.get_container()

        assert first is second
        create.assert_called_once()

    def test_container_failure_is_server_error(self):
        with patch.object(lambda_handler, "_container", None), \
             patch.object(lambda_handler.AppContainer, "create", side_effect=RuntimeError("no engine")):
            envelope = lambda_handler.handler({"httpMethod": "GET", "path": "/posts"}, None)

        assert envelope["statusCode"] == 500
        assert json.loads(envelope["body"]) == {"error": "Server Error"}
        assert envelope["headers"]["Access-Control-Allow-Origin"] == "*"
