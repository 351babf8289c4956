"""
Bulletin Board API — Upload Handler
=====================================

    POST /upload  {"file": <data URI or URL>, "folder"?: str}
        → 200 vendor upload result (secure_url, public_id, ...)
        → 500 {"error": <vendor message>} when the media host fails

This is the one operation that reports a vendor's own error text to the
caller, so MediaUploadError is handled here instead of in the router.
"""

import logging

from bulletin.envelope import Envelope, error_envelope, json_envelope
from bulletin.exceptions import MediaUploadError
from bulletin.router import RouteRequest
from bulletin.routes.validation import parse_body
from bulletin.schemas.vendor import UploadRequest

logger = logging.getLogger(__name__)


async def upload(request: RouteRequest, container) -> Envelope:
    data = parse_body(UploadRequest, request)
    folder = container.variant.upload_folder(
        data.folder, default=container.settings.upload_default_folder
    )
    if data.folder and folder != data.folder:
        logger.debug("Ignoring requested folder '%s'; using '%s'", data.folder, folder)

    try:
        result = await container.media.upload(data.file, folder=folder)
    except MediaUploadError as e:
        logger.error("Upload failed: %s | Context: %s", e.message, e.context)
        return error_envelope(500, e.message)

    return json_envelope(200, result)
