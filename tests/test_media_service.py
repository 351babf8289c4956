"""
Bulletin Board API — Media Service Tests (Mocked)
===================================================

What:  Cloudinary upload/delete wrapper with the SDK patched out.

What we test:
    ✅ Upload forwards file and folder, returns the vendor result verbatim
    ✅ Missing folder falls back to UPLOAD_DEFAULT_FOLDER
    ✅ Vendor exceptions become MediaUploadError carrying the vendor message
    ✅ SDK is configured once with the credentials from settings
"""

from unittest.mock import MagicMock, patch

import pytest

from bulletin.exceptions import MediaUploadError
from bulletin.services.media_service import MediaService


VENDOR_RESULT = {
    "public_id": "listings/xyz",
    "secure_url": "https://res.cloudinary.com/test-cloud/image/upload/listings/xyz.png",
    "width": 640,
    "height": 480,
}


class TestMediaService:

    @pytest.mark.asyncio
    async def test_upload_returns_vendor_result(self, test_settings):
        with patch("bulletin.services.media_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload = MagicMock(return_value=VENDOR_RESULT)
            service = MediaService(test_settings)

            result = await service.upload("data:image/png;base64,iVBORw0K", folder="listings")

        assert result == VENDOR_RESULT
        mock_cloudinary.uploader.upload.assert_called_once_with(
            "data:image/png;base64,iVBORw0K", folder="listings"
        )

    @pytest.mark.asyncio
    async def test_default_folder(self, test_settings):
        with patch("bulletin.services.media_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload = MagicMock(return_value=VENDOR_RESULT)
            await MediaService(test_settings).upload("https://example.com/photo.jpg")

        assert mock_cloudinary.uploader.upload.call_args.kwargs["folder"] == "items"

    @pytest.mark.asyncio
    async def test_vendor_failure_keeps_message(self, test_settings):
        with patch("bulletin.services.media_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload = MagicMock(side_effect=Exception("Invalid image file"))

            with pytest.raises(MediaUploadError) as exc_info:
                await MediaService(test_settings).upload("not-an-image")

        assert exc_info.value.message == "Invalid image file"

    @pytest.mark.asyncio
    async def test_configured_once(self, test_settings):
        with patch("bulletin.services.media_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.upload = MagicMock(return_value=VENDOR_RESULT)
            service = MediaService(test_settings)
            await service.upload("https://example.com/a.jpg")
            await service.upload("https://example.com/b.jpg")

        mock_cloudinary.config.assert_called_once_with(
            cloud_name="test-cloud", api_key="test-key", api_secret="test-secret", secure=True
        )

    @pytest.mark.asyncio
    async def test_delete(self, test_settings):
        with patch("bulletin.services.media_service.cloudinary") as mock_cloudinary:
            mock_cloudinary.uploader.destroy = MagicMock(return_value={"result": "ok"})
            result = await MediaService(test_settings).delete("listings/xyz")

        assert result == {"result": "ok"}
        mock_cloudinary.uploader.destroy.assert_called_once_with("listings/xyz")
