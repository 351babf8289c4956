"""
Bulletin Board API — Reduced Schema ORM Models
================================================

What:  ORM models for the `posts` and `responses` tables in the reduced
       layout: a single `location` string, `author_id` as submitter,
       status/condition/tags on listings, and `message` replies.
Who:   Used by PostService when SCHEMA_VARIANT=reduced, and by Alembic.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bulletin.database import ReducedBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(ReducedBase):
    """A listing in the reduced layout."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    author_id: Mapped[str] = mapped_column(String(120), nullable=False)

    # Free-form labels set by the submitter
    status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    condition: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"


class Response(ReducedBase):
    """A reply attached to exactly one reduced-layout listing."""

    __tablename__ = "responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str] = mapped_column(String(120), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Response(id={self.id}, post_id={self.post_id})>"


# ── Indexes ───────────────────────────────────────────────────────────────
# Feed query: newest listings first
Index("idx_posts_created_at", Post.created_at.desc())
# Replies for one listing, oldest first
Index("idx_responses_post_created", Response.post_id, Response.created_at)
