"""
Bulletin Board API — Full Schema ORM Models
=============================================

What:  ORM models for the `posts` and `responses` tables in the full layout
       (street address location, nickname as submitter, `content` replies).
Who:   Used by PostService when SCHEMA_VARIANT=full, and by Alembic.

Table Design:
    - UUID primary keys, generated on insert
    - created_at assigned once at insert (UTC), never updated
    - responses.post_id references posts.id; the storage layer rejects
      replies to a listing that does not exist
    - idx_posts_created_at (DESC) serves the feed query
    - idx_responses_post_created serves "replies for a listing, oldest first"
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from bulletin.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """
    A listing in the full layout.

    Query Patterns:
        - Feed:   SELECT ... ORDER BY created_at DESC LIMIT 20
        - Detail: SELECT ... WHERE id = :id
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Location ──────────────────────────────────────────────────────────
    street_name: Mapped[str] = mapped_column(Text, nullable=False)
    suburb: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    postcode: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    category: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    nickname: Mapped[str] = mapped_column(String(120), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"


class Response(Base):
    """A reply attached to exactly one full-layout listing."""

    __tablename__ = "responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    nickname: Mapped[str] = mapped_column(String(120), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
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
