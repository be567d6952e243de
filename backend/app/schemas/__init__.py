from backend.app.schemas.feature import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    FeatureCreate,
    FeatureResponse,
    FeatureUpdate,
    FeatureVoteCreate,
    FeatureVoteResponse,
    FeatureVoteUpdate,
    VoteCountResponse,
)
from backend.app.schemas.user import UserPurgeResponse, UserResponse, UserSync

__all__ = [
    "UserSync",
    "UserResponse",
    "UserPurgeResponse",
    "FeatureCreate",
    "FeatureUpdate",
    "FeatureResponse",
    "VoteCountResponse",
    "FeatureVoteCreate",
    "FeatureVoteUpdate",
    "FeatureVoteResponse",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
]
