"""Comment store. Authors edit and delete their own comments; there is no
moderator override."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db import utcnow
from backend.app.models.feature import Feature, FeatureComment
from backend.app.services import policies
from backend.app.services.errors import ConstraintViolation, NotFound, flush
from backend.app.services.policies import COMMENTS, Action, Caller

logger = logging.getLogger(__name__)


async def add_comment(
    db: AsyncSession,
    caller: Caller,
    feature_id: str,
    content: str,
    user_id: str | None = None,
) -> FeatureComment:
    author = user_id if user_id is not None else caller.user_id
    policies.check(caller, COMMENTS, Action.insert, {"feature_id": feature_id, "user_id": author})

    if not content:
        raise ConstraintViolation('null value in column "content" violates not-null constraint')
    if await db.get(Feature, feature_id) is None:
        raise NotFound(f"Feature {feature_id} not found")

    comment = FeatureComment(feature_id=feature_id, user_id=author, content=content)
    db.add(comment)
    await flush(db)

    logger.info("User %s commented on feature %s", author, feature_id)
    return comment


async def list_comments(db: AsyncSession, feature_id: str) -> list[FeatureComment]:
    result = await db.execute(
        select(FeatureComment)
        .where(FeatureComment.feature_id == feature_id)
        .order_by(FeatureComment.created_at)
    )
    return list(result.scalars().all())


async def edit_comment(
    db: AsyncSession,
    caller: Caller,
    comment_id: str,
    content: str,
) -> FeatureComment | None:
    comment = await db.get(FeatureComment, comment_id)
    if comment is None or not policies.is_allowed(caller, COMMENTS, Action.update, comment):
        return None
    if not content:
        raise ConstraintViolation('null value in column "content" violates not-null constraint')

    comment.content = content
    comment.updated_at = utcnow()
    await flush(db)
    return comment


async def delete_comment(db: AsyncSession, caller: Caller, comment_id: str) -> bool:
    comment = await db.get(FeatureComment, comment_id)
    if comment is None or not policies.is_allowed(caller, COMMENTS, Action.delete, comment):
        return False

    await db.delete(comment)
    await flush(db)

    logger.info("User %s deleted comment %s", caller.user_id, comment_id)
    return True
