"""Feature, vote and comment schemas."""

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.feature import FeatureStatus, VoteType


class FeatureCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None
    category: str | None = None
    status: FeatureStatus | None = None
    # Must equal the caller when given; defaults to the caller.
    created_by: str | None = None


class FeatureUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: FeatureStatus | None = None
    category: str | None = None


class FeatureResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    status: FeatureStatus
    category: str | None = None
    created_by: str
    created_at: str
    updated_at: str
    upvotes: int = 0
    downvotes: int = 0
    net_votes: int = 0
    comment_count: int = 0


class VoteCountResponse(BaseModel):
    upvotes: int = 0
    downvotes: int = 0
    net_votes: int = 0


class FeatureVoteCreate(BaseModel):
    vote_type: VoteType = VoteType.upvote
    user_id: str | None = None


class FeatureVoteUpdate(BaseModel):
    vote_type: VoteType


class FeatureVoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    feature_id: str
    user_id: str
    vote_type: VoteType
    created_at: str


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    user_id: str | None = None


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    feature_id: str
    user_id: str
    content: str
    created_at: str
    updated_at: str
