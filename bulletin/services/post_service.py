"""
Bulletin Board API — Post Service (Data Access)
=================================================

What:  One method per entity operation on listings and their responses.
How:   Every method runs exactly one parameterized statement on the session
       it is given. The caller owns the session (bulletin.database.session_scope),
       which guarantees commit/rollback and release.
Who:   Called by the route handlers in bulletin.routes.posts / .responses.

Operations:
    list_posts         SELECT ... ORDER BY created_at DESC LIMIT 20
    create_post        INSERT INTO posts ... RETURNING *
    get_post           SELECT ... WHERE id = :id
    list_responses     SELECT ... WHERE post_id = :id ORDER BY created_at ASC
    create_response    INSERT INTO responses ... RETURNING *

The feed is newest-first while replies are oldest-first.
"""

import logging
from typing import List
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import asc, desc, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bulletin.exceptions import DatabaseError, NotFoundError
from bulletin.variants import SchemaVariant

logger = logging.getLogger(__name__)

# Number of listings in the feed. Fixed: the feed has no cursor or offset.
FEED_LIMIT = 20


class PostService:
    """
    Data access for one schema variant.

    Error Handling Strategy:
        SQLAlchemy errors are logged and wrapped in DatabaseError (details
        stay in `context`). A missing listing raises NotFoundError.
    """

    def __init__(self, variant: SchemaVariant):
        self.variant = variant
        self.Post = variant.post_model
        self.Response = variant.response_model

    async def list_posts(self, db: AsyncSession) -> List[BaseModel]:
        """
        Return the newest FEED_LIMIT listings, newest first.

        Query plan:
            SELECT * FROM posts ORDER BY created_at DESC LIMIT 20
            → idx_posts_created_at
        """
        try:
            result = await db.execute(
                select(self.Post).order_by(desc(self.Post.created_at)).limit(FEED_LIMIT)
            )
            posts = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing posts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not list posts",
                context={"error_type": type(e).__name__},
            ) from e

        return [self.variant.post_out.model_validate(post) for post in posts]

    async def create_post(self, db: AsyncSession, data: BaseModel) -> BaseModel:
        """
        Insert one listing and return the stored row.

        Args:
            db:   Session from session_scope (committed by the caller)
            data: A validated `variant.post_create` instance

        Returns:
            `variant.post_out` with the server-assigned id and created_at.
        """
        values = data.model_dump()
        try:
            result = await db.execute(
                insert(self.Post).values(**values).returning(self.Post)
            )
            post = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error creating post: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create post",
                context={"error_type": type(e).__name__, "fields": sorted(values)},
            ) from e

        logger.info("Post created: %s", post.id)
        return self.variant.post_out.model_validate(post)

    async def get_post(self, db: AsyncSession, post_id: UUID) -> BaseModel:
        """
        Fetch one listing by primary key.

        Raises:
            NotFoundError: No listing has this id (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(self.Post).where(self.Post.id == post_id))
            post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching post %s: %s", post_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not fetch post",
                context={"post_id": str(post_id)},
            ) from e

        if post is None:
            raise NotFoundError(resource="post", resource_id=str(post_id))
        return self.variant.post_out.model_validate(post)

    async def list_responses(self, db: AsyncSession, post_id: UUID) -> List[BaseModel]:
        """
        Return every response to `post_id`, oldest first.

        An unknown post_id yields an empty list; existence of the parent is
        not checked here.
        """
        try:
            result = await db.execute(
                select(self.Response)
                .where(self.Response.post_id == post_id)
                .order_by(asc(self.Response.created_at))
            )
            responses = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Database error listing responses for %s: %s", post_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message="Could not list responses",
                context={"post_id": str(post_id)},
            ) from e

        return [self.variant.response_out.model_validate(r) for r in responses]

    async def create_response(self, db: AsyncSession, data: BaseModel) -> BaseModel:
        """
        Insert one response and return the stored row.

        The parent listing must exist; the foreign key on responses.post_id
        rejects the insert otherwise and the failure surfaces as DatabaseError.
        """
        values = data.model_dump()
        try:
            result = await db.execute(
                insert(self.Response).values(**values).returning(self.Response)
            )
            response = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Database error creating response: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create response",
                context={"error_type": type(e).__name__, "post_id": str(values.get("post_id"))},
            ) from e

        logger.info("Response %s created for post %s", response.id, response.post_id)
        return self.variant.response_out.model_validate(response)
