"""
Bulletin Board API — Media Upload Service
===========================================

What:  Thin async wrapper around the Cloudinary uploader.
How:   The Cloudinary SDK is blocking, so each call runs in a worker thread
       (asyncio.to_thread). The SDK is configured once, on first use.
Who:   POST /upload handler; callers that need to undo an upload after a
       failed listing insert use `delete()`.

Accepted `file` payloads (the SDK tells them apart):
    - base64 data URI:  "data:image/png;base64,iVBORw0K..."
    - remote URL:       "https://example.com/photo.jpg"

The vendor's result object is returned unchanged. It always holds
`secure_url` and `public_id`; everything else is whatever Cloudinary sends.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader

from bulletin.config import Settings
from bulletin.exceptions import MediaUploadError

logger = logging.getLogger(__name__)


class MediaService:
    """Uploads and deletes images on the media host."""

    def __init__(self, settings: Settings):
        self.default_folder = settings.upload_default_folder
        self._cloud_name = settings.cloudinary_cloud_name
        self._api_key = settings.cloudinary_api_key
        self._api_secret = settings.cloudinary_api_secret
        self._configured = False

    def _configure(self) -> None:
        if self._configured:
            return
        cloudinary.config(
            cloud_name=self._cloud_name,
            api_key=self._api_key,
            api_secret=self._api_secret,
            secure=True,
        )
        self._configured = True
        logger.info("Cloudinary configured for cloud '%s'", self._cloud_name)

    async def upload(self, file: str, folder: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload one image.

        Args:
            file:   Base64 data URI or publicly reachable URL.
            folder: Target folder; falls back to UPLOAD_DEFAULT_FOLDER.

        Returns:
            The vendor result dict, verbatim.

        Raises:
            MediaUploadError: Cloudinary rejected the upload. `message` is the
                vendor's own error text.
        """
        self._configure()
        target = folder or self.default_folder
        start_time = time.time()

        try:
            result = await asyncio.to_thread(cloudinary.uploader.upload, file, folder=target)
        except Exception as e:
            logger.error("Upload to folder '%s' failed: %s", target, str(e))
            raise MediaUploadError(
                message=str(e),
                context={"folder": target, "error_type": type(e).__name__},
            ) from e

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Uploaded %s to folder '%s' in %.0fms",
            result.get("public_id"),
            target,
            duration_ms,
        )
        return result

    async def delete(self, public_id: str) -> Dict[str, Any]:
        """
        Remove a previously uploaded image.

        There is no transaction spanning the upload and the listing insert;
        a caller whose insert failed can use this to drop the orphaned image.
        """
        self._configure()
        try:
            result = await asyncio.to_thread(cloudinary.uploader.destroy, public_id)
        except Exception as e:
            logger.error("Delete of %s failed: %s", public_id, str(e))
            raise MediaUploadError(
                message=str(e),
                context={"public_id": public_id, "error_type": type(e).__name__},
            ) from e

        logger.info("Deleted %s (%s)", public_id, result.get("result"))
        return result
