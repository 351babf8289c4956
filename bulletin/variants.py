"""
Bulletin Board API — Schema Variants
======================================

What:  Binds each supported table layout to its ORM models, input schemas,
       output schemas and upload-folder policy.
How:   `get_variant(name)` returns an immutable SchemaVariant; PostService
       and the upload handler read everything layout-specific from it.

    full     posts(description, street_name, suburb, postcode, nickname)
             responses(nickname, content)
             upload folder: taken from the body, default "items"

    reduced  posts(body, location, author_id, status, condition, tags)
             responses(author_id, message)
             upload folder: always "items"
"""

from dataclasses import dataclass
from typing import Dict, Optional, Type

from pydantic import BaseModel

from bulletin.models import full, reduced
from bulletin.schemas.listing import (
    FullPostCreate,
    FullPostOut,
    FullResponseCreate,
    FullResponseOut,
    ReducedPostCreate,
    ReducedPostOut,
    ReducedResponseCreate,
    ReducedResponseOut,
)


@dataclass(frozen=True)
class SchemaVariant:
    name: str
    post_model: type
    response_model: type
    post_create: Type[BaseModel]
    post_out: Type[BaseModel]
    response_create: Type[BaseModel]
    response_out: Type[BaseModel]
    # When False, the client-supplied upload folder is ignored
    accepts_upload_folder: bool

    @property
    def metadata(self):
        """MetaData holding this layout's tables (used by Alembic and tests)."""
        return self.post_model.metadata

    def upload_folder(self, requested: Optional[str], default: str = "items") -> str:
        if self.accepts_upload_folder and requested:
            return requested
        return default


FULL = SchemaVariant(
    name="full",
    post_model=full.Post,
    response_model=full.Response,
    post_create=FullPostCreate,
    post_out=FullPostOut,
    response_create=FullResponseCreate,
    response_out=FullResponseOut,
    accepts_upload_folder=True,
)

REDUCED = SchemaVariant(
    name="reduced",
    post_model=reduced.Post,
    response_model=reduced.Response,
    post_create=ReducedPostCreate,
    post_out=ReducedPostOut,
    response_create=ReducedResponseCreate,
    response_out=ReducedResponseOut,
    accepts_upload_folder=False,
)

VARIANTS: Dict[str, SchemaVariant] = {v.name: v for v in (FULL, REDUCED)}


def get_variant(name: str) -> SchemaVariant:
    try:
        return VARIANTS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown schema variant '{name}'. Known: {sorted(VARIANTS)}") from None
