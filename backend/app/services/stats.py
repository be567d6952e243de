"""Vote and comment aggregates, computed on read.

Nothing here is persisted. The batch projection (also installed as the
``feature_with_stats`` view) and the single-feature lookup are built from the
same tally expression, so both report identical numbers for a feature read at
the same point in time.
"""

from typing import Any

from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.models.feature import (
    Feature,
    FeatureComment,
    FeatureStatus,
    FeatureVote,
    VoteType,
)

FEATURE_COLUMNS = (
    "id",
    "title",
    "description",
    "status",
    "category",
    "created_by",
    "created_at",
    "updated_at",
)


def vote_tally_columns() -> tuple:
    """(upvotes, downvotes, net_votes) aggregate columns over ``feature_votes``."""
    upvotes = func.count(case((FeatureVote.vote_type == VoteType.upvote, 1)))
    downvotes = func.count(case((FeatureVote.vote_type == VoteType.downvote, 1)))
    return (
        upvotes.label("upvotes"),
        downvotes.label("downvotes"),
        (upvotes - downvotes).label("net_votes"),
    )


def features_with_stats_query(
    status: FeatureStatus | str | None = None,
    category: str | None = None,
) -> Select:
    """Every feature joined with its vote summary and comment count.

    Features without votes or comments get zeros, not NULLs.
    """
    votes = (
        select(FeatureVote.feature_id, *vote_tally_columns())
        .group_by(FeatureVote.feature_id)
        .subquery("v")
    )
    comments = (
        select(FeatureComment.feature_id, func.count().label("comment_count"))
        .group_by(FeatureComment.feature_id)
        .subquery("c")
    )

    query = (
        select(
            Feature,
            func.coalesce(votes.c.upvotes, 0).label("upvotes"),
            func.coalesce(votes.c.downvotes, 0).label("downvotes"),
            func.coalesce(votes.c.net_votes, 0).label("net_votes"),
            func.coalesce(comments.c.comment_count, 0).label("comment_count"),
        )
        .outerjoin(votes, Feature.id == votes.c.feature_id)
        .outerjoin(comments, Feature.id == comments.c.feature_id)
    )

    if status:
        query = query.where(Feature.status == FeatureStatus(status))
    if category:
        query = query.where(Feature.category == category)
    return query


def feature_vote_count_query(feature_id: str) -> Select:
    """(upvotes, downvotes, net_votes) for a single feature.

    Always yields exactly one row; an unknown feature or one without votes
    reports (0, 0, 0).
    """
    return select(*vote_tally_columns()).where(FeatureVote.feature_id == feature_id)


def feature_to_dict(feature: Feature, **stats: int) -> dict[str, Any]:
    data = {column: getattr(feature, column) for column in FEATURE_COLUMNS}
    data["upvotes"] = stats.get("upvotes", 0)
    data["downvotes"] = stats.get("downvotes", 0)
    data["net_votes"] = stats.get("net_votes", 0)
    data["comment_count"] = stats.get("comment_count", 0)
    return data


def _row_to_dict(row) -> dict[str, Any]:
    feature, upvotes, downvotes, net_votes, comment_count = row
    return feature_to_dict(
        feature,
        upvotes=upvotes,
        downvotes=downvotes,
        net_votes=net_votes,
        comment_count=comment_count,
    )


async def get_features_with_stats(
    db: AsyncSession,
    status: FeatureStatus | str | None = None,
    category: str | None = None,
) -> list[dict[str, Any]]:
    query = features_with_stats_query(status=status, category=category).order_by(
        Feature.created_at.desc()
    )
    result = await db.execute(query)
    return [_row_to_dict(row) for row in result.all()]


async def get_feature_with_stats(db: AsyncSession, feature_id: str) -> dict[str, Any] | None:
    result = await db.execute(features_with_stats_query().where(Feature.id == feature_id))
    row = result.one_or_none()
    return _row_to_dict(row) if row is not None else None


async def get_feature_vote_count(db: AsyncSession, feature_id: str) -> dict[str, int]:
    result = await db.execute(feature_vote_count_query(feature_id))
    upvotes, downvotes, net_votes = result.one()
    return {"upvotes": upvotes, "downvotes": downvotes, "net_votes": net_votes}
