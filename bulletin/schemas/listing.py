"""
Bulletin Board API — Listing & Response Schemas
=================================================

What:  Pydantic models for the request bodies and row representations of
       listings ("posts") and their replies ("responses").
How:   Each operation validates its body against a *Create model before a
       statement is built; rows coming back from the database are turned
       into JSON through the matching *Out model.

Two layouts are supported (see bulletin.variants):
    full    — FullPostCreate / FullPostOut / FullResponseCreate / FullResponseOut
    reduced — ReducedPostCreate / ReducedPostOut / ReducedResponseCreate / ReducedResponseOut

Defaulting rule for optional fields: omitted, null and "" all become None.
Text limits mirror the column widths in bulletin.models, so overlong values
are rejected as 400 before reaching the database.
"""

import uuid
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value):
    """Empty strings are stored as NULL, like omitted values."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _InputModel(BaseModel):
    # Unknown keys are ignored; numeric ids/postcodes are accepted as text
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class _RowModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ══════════════════════════════════════════════════════════════════════════
# Full layout
# ══════════════════════════════════════════════════════════════════════════


class FullPostCreate(_InputModel):
    """Body of POST /posts in the full layout."""

    title: str = Field(min_length=1, description="Listing headline")
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None, description="secure_url returned by POST /upload")
    street_name: str = Field(min_length=1)
    suburb: Optional[str] = Field(default=None, max_length=120)
    postcode: Optional[str] = Field(default=None, max_length=16)
    category: Optional[str] = Field(default=None, max_length=64)
    nickname: str = Field(min_length=1, max_length=120, description="Display name of the submitter")

    @field_validator("description", "image_url", "suburb", "postcode", "category", mode="before")
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)


class FullPostOut(_RowModel):
    """A full-layout listing row as returned to clients."""

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    street_name: Optional[str] = None
    suburb: Optional[str] = None
    postcode: Optional[str] = None
    category: Optional[str] = None
    nickname: Optional[str] = None
    created_at: datetime


class FullResponseCreate(_InputModel):
    """Body of POST /responses in the full layout."""

    post_id: uuid.UUID = Field(description="Listing being replied to")
    nickname: str = Field(min_length=1, max_length=120)
    content: str = Field(min_length=1)


class FullResponseOut(_RowModel):
    id: uuid.UUID
    post_id: uuid.UUID
    nickname: str
    content: str
    created_at: datetime


# ══════════════════════════════════════════════════════════════════════════
# Reduced layout
# ══════════════════════════════════════════════════════════════════════════


class ReducedPostCreate(_InputModel):
    """
    Body of POST /posts in the reduced layout.

    `tags` accepts either a JSON array of strings or one comma-separated
    string ("free, pickup only"); both are stored as a list.
    """

    title: str = Field(min_length=1)
    body: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None)
    category: Optional[str] = Field(default=None, max_length=64)
    author_id: str = Field(min_length=1, max_length=120)
    status: Optional[str] = Field(default=None, max_length=32)
    condition: Optional[str] = Field(default=None, max_length=32)
    tags: Optional[Union[List[str], str]] = Field(default=None)

    @field_validator(
        "body", "image_url", "location", "category", "status", "condition", mode="before"
    )
    @classmethod
    def blank_optional(cls, v):
        return _blank_to_none(v)

    @field_validator("tags", mode="after")
    @classmethod
    def split_tags(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = v.split(",")
        tags = [tag.strip() for tag in v if tag and tag.strip()]
        return tags or None


class ReducedPostOut(_RowModel):
    id: uuid.UUID
    title: str
    body: Optional[str] = None
    image_url: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    author_id: Optional[str] = None
    status: Optional[str] = None
    condition: Optional[str] = None
    tags: Optional[List[str]] = None
    created_at: datetime


class ReducedResponseCreate(_InputModel):
    """Body of POST /responses in the reduced layout."""

    post_id: uuid.UUID
    author_id: str = Field(min_length=1, max_length=120)
    message: str = Field(min_length=1)


class ReducedResponseOut(_RowModel):
    id: uuid.UUID
    post_id: uuid.UUID
    author_id: str
    message: str
    created_at: datetime
