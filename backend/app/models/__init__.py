from backend.app.models.user import User
from backend.app.models.feature import (
    Feature,
    FeatureComment,
    FeatureStatus,
    FeatureVote,
    VoteType,
)

__all__ = [
    "User",
    "Feature",
    "FeatureVote",
    "FeatureComment",
    "FeatureStatus",
    "VoteType",
]
