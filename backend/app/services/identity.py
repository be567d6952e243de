"""Identity-provider mirror.

User accounts live in an external identity provider. This module keeps the
local ``users`` rows the foreign keys point at, resolves the caller for a
request, and removes everything a user owned when the provider reports the
account deleted.
"""

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.feature import Feature, FeatureComment, FeatureVote
from backend.app.models.user import User
from backend.app.services.errors import flush
from backend.app.services.policies import ANONYMOUS, Caller

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def upsert_user(
    db: AsyncSession,
    user_id: str,
    *,
    email: str | None = None,
    display_name: str | None = None,
    role: str | None = None,
) -> User:
    """Create or refresh the local mirror of an identity-provider account."""
    user = await db.get(User, user_id)
    if user is None:
        user = User(id=user_id, email=email, display_name=display_name, role=role)
        db.add(user)
        logger.info("Registered user %s", user_id)
    else:
        user.email = email
        user.display_name = display_name
        user.role = role
    await flush(db)
    return user


async def resolve_caller(db: AsyncSession, user_id: str | None) -> Caller:
    """Build the Caller for ``user_id``, reading the role from the mirrored row.

    An unknown id still authenticates (its writes fail on the foreign key);
    a missing id is anonymous.
    """
    if not user_id:
        return ANONYMOUS
    user = await db.get(User, user_id)
    return Caller(user_id=user_id, role=user.role if user is not None else None)


async def purge_user(db: AsyncSession, user_id: str) -> dict[str, int] | None:
    """Remove a user and everything that depends on them.

    Deletes the user's comments and votes, every comment and vote on the
    features they created, those features, and finally the user row. Returns
    per-table counts, or None if the user is unknown.
    """
    user = await db.get(User, user_id)
    if user is None:
        return None

    owned_features = select(Feature.id).where(Feature.created_by == user_id)
    comment_ids = list(
        await db.scalars(
            select(FeatureComment.id).where(
                or_(
                    FeatureComment.user_id == user_id,
                    FeatureComment.feature_id.in_(owned_features),
                )
            )
        )
    )
    vote_ids = list(
        await db.scalars(
            select(FeatureVote.id).where(
                or_(
                    FeatureVote.user_id == user_id,
                    FeatureVote.feature_id.in_(owned_features),
                )
            )
        )
    )
    feature_ids = list(await db.scalars(owned_features))

    # Children first so the foreign keys never see an orphan.
    for model, ids in (
        (FeatureComment, comment_ids),
        (FeatureVote, vote_ids),
        (Feature, feature_ids),
    ):
        if ids:
            await db.execute(
                delete(model).where(model.id.in_(ids)),
                execution_options={"synchronize_session": "fetch"},
            )
    await db.delete(user)
    await flush(db)

    counts = {
        "features": len(feature_ids),
        "votes": len(vote_ids),
        "comments": len(comment_ids),
    }
    logger.info(
        "Purged user %s: %d features, %d votes, %d comments",
        user_id,
        counts["features"],
        counts["votes"],
        counts["comments"],
    )
    return counts
