import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db import Base, utcnow


class FeatureStatus(enum.StrEnum):
    backlog = "backlog"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    in_progress = "in_progress"


class VoteType(enum.StrEnum):
    upvote = "upvote"
    downvote = "downvote"


def _new_id() -> str:
    return str(uuid.uuid4())


class Feature(Base):
    __tablename__ = "features"
    __table_args__ = (
        Index("idx_features_status", "status"),
        Index("idx_features_created_by", "created_by"),
        Index("idx_features_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    # Any status may follow any other; lifecycle ordering is not enforced here.
    status: Mapped[FeatureStatus] = mapped_column(
        Enum(FeatureStatus, name="feature_status", create_constraint=True),
        nullable=False,
        default=FeatureStatus.backlog,
    )
    category: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_by: Mapped[str] = mapped_column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)
    updated_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)


class FeatureVote(Base):
    __tablename__ = "feature_votes"
    __table_args__ = (
        # One vote per voter per feature; changing a vote means updating this row.
        UniqueConstraint("feature_id", "user_id", name="uq_feature_votes_feature_user"),
        Index("idx_feature_votes_feature_id", "feature_id"),
        Index("idx_feature_votes_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    feature_id: Mapped[str] = mapped_column(
        String, ForeignKey("features.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    vote_type: Mapped[VoteType] = mapped_column(
        Enum(VoteType, name="vote_type", create_constraint=True),
        nullable=False,
        default=VoteType.upvote,
    )
    created_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)


class FeatureComment(Base):
    __tablename__ = "feature_comments"
    __table_args__ = (
        Index("idx_feature_comments_feature_id", "feature_id"),
        Index("idx_feature_comments_user_id", "user_id"),
        Index("idx_feature_comments_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_new_id)
    feature_id: Mapped[str] = mapped_column(
        String, ForeignKey("features.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)
    updated_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)
