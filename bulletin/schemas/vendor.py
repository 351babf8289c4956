"""
Bulletin Board API — Vendor Proxy Request Schemas
===================================================

What:  Request bodies for the two endpoints that proxy third-party APIs:
       POST /upload (media host) and POST /analyze (multimodal model).
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UploadRequest(BaseModel):
    """
    Body of POST /upload.

    `file` is either a base64 data URI ("data:image/jpeg;base64,...") or a
    remote URL; the media SDK tells them apart. `folder` is honoured only in
    the full layout.
    """

    model_config = ConfigDict(extra="ignore")

    file: str = Field(min_length=1, description="Base64 data URI or remote URL")
    folder: Optional[str] = Field(default=None, description="Destination folder on the media host")

    @field_validator("folder", mode="before")
    @classmethod
    def blank_folder(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class AnalyzeRequest(BaseModel):
    """
    Body of POST /analyze.

    Only the first entry of `file_urls` is sent to the model; the rest are
    ignored.
    """

    model_config = ConfigDict(extra="ignore")

    prompt: str = Field(min_length=1, description="Instruction text sent to the model")
    file_urls: Optional[List[str]] = Field(default=None, description="Image URLs; only the first is used")
