"""Create posts and responses tables

Revision ID: 001
Revises: None
Create Date: 2024-05-01 00:00:00.000000+00:00

What:  Creates `posts` and `responses` for the layout named by SCHEMA_VARIANT.
How:   PostgreSQL UUID keys generated by gen_random_uuid(), TIMESTAMPTZ
       creation times, a cascading foreign key from responses to posts.

Rollback: downgrade() drops both tables (destructive).
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from bulletin.config import settings

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _created_at_column() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _post_columns(variant: str) -> List[sa.Column]:
    if variant == "reduced":
        return [
            sa.Column("title", sa.Text(), nullable=False),
            sa.Column("body", sa.Text(), nullable=True),
            sa.Column("image_url", sa.Text(), nullable=True),
            sa.Column("location", sa.Text(), nullable=True),
            sa.Column("category", sa.String(64), nullable=True),
            sa.Column("author_id", sa.String(120), nullable=False),
            sa.Column("status", sa.String(32), nullable=True),
            sa.Column("condition", sa.String(32), nullable=True),
            sa.Column("tags", sa.JSON(), nullable=True),
        ]
    return [
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("street_name", sa.Text(), nullable=False),
        sa.Column("suburb", sa.String(120), nullable=True),
        sa.Column("postcode", sa.String(16), nullable=True),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("nickname", sa.String(120), nullable=False),
    ]


def _response_columns(variant: str) -> List[sa.Column]:
    if variant == "reduced":
        return [
            sa.Column("author_id", sa.String(120), nullable=False),
            sa.Column("message", sa.Text(), nullable=False),
        ]
    return [
        sa.Column("nickname", sa.String(120), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
    ]


def upgrade() -> None:
    variant = settings.schema_variant

    op.create_table(
        "posts",
        _id_column(),
        *_post_columns(variant),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    # Feed query: ORDER BY created_at DESC LIMIT 20
    op.create_index("idx_posts_created_at", "posts", [sa.text("created_at DESC")])

    op.create_table(
        "responses",
        _id_column(),
        sa.Column("post_id", postgresql.UUID(as_uuid=True), nullable=False),
        *_response_columns(variant),
        _created_at_column(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
    )
    # Thread query: WHERE post_id = :id ORDER BY created_at ASC
    op.create_index("idx_responses_post_created", "responses", ["post_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_responses_post_created", table_name="responses")
    op.drop_table("responses")
    op.drop_index("idx_posts_created_at", table_name="posts")
    op.drop_table("posts")
