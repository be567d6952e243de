"""Vote store: at most one vote per (feature, voter).

Changing your mind means updating or deleting the existing vote row; a
second insert for the same pair is a constraint violation.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.feature import Feature, FeatureVote, VoteType
from backend.app.services import policies
from backend.app.services.errors import ConstraintViolation, NotFound, flush
from backend.app.services.policies import VOTES, Action, Caller

logger = logging.getLogger(__name__)


async def cast_vote(
    db: AsyncSession,
    caller: Caller,
    feature_id: str,
    vote_type: VoteType | str = VoteType.upvote,
    user_id: str | None = None,
) -> FeatureVote:
    voter = user_id if user_id is not None else caller.user_id
    policies.check(caller, VOTES, Action.insert, {"feature_id": feature_id, "user_id": voter})

    if await db.get(Feature, feature_id) is None:
        raise NotFound(f"Feature {feature_id} not found")

    existing = await db.execute(
        select(FeatureVote.id).where(
            FeatureVote.feature_id == feature_id,
            FeatureVote.user_id == voter,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConstraintViolation(
            'duplicate key value violates unique constraint "uq_feature_votes_feature_user"'
        )

    vote = FeatureVote(feature_id=feature_id, user_id=voter, vote_type=VoteType(vote_type))
    db.add(vote)
    # A concurrent insert for the same pair still trips the unique constraint here.
    await flush(db)

    logger.info("User %s cast %s on feature %s", voter, vote.vote_type, feature_id)
    return vote


async def list_votes(db: AsyncSession, feature_id: str) -> list[FeatureVote]:
    result = await db.execute(
        select(FeatureVote)
        .where(FeatureVote.feature_id == feature_id)
        .order_by(FeatureVote.created_at)
    )
    return list(result.scalars().all())


async def get_user_vote(db: AsyncSession, feature_id: str, user_id: str) -> FeatureVote | None:
    result = await db.execute(
        select(FeatureVote).where(
            FeatureVote.feature_id == feature_id,
            FeatureVote.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def change_vote(
    db: AsyncSession,
    caller: Caller,
    vote_id: str,
    vote_type: VoteType | str,
) -> FeatureVote | None:
    """Flip an existing vote. None when the vote is missing or not the caller's."""
    vote = await db.get(FeatureVote, vote_id)
    if vote is None or not policies.is_allowed(caller, VOTES, Action.update, vote):
        return None

    vote.vote_type = VoteType(vote_type)
    await flush(db)

    logger.info("User %s changed vote %s to %s", caller.user_id, vote_id, vote.vote_type)
    return vote


async def retract_vote(db: AsyncSession, caller: Caller, vote_id: str) -> bool:
    """Delete a vote. False when the vote is missing or not the caller's."""
    vote = await db.get(FeatureVote, vote_id)
    if vote is None or not policies.is_allowed(caller, VOTES, Action.delete, vote):
        return False

    await db.delete(vote)
    await flush(db)

    logger.info("User %s retracted vote %s", caller.user_id, vote_id)
    return True
