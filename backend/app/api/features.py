"""Feature request endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.deps import require_caller
from backend.app.db import get_db
from backend.app.models.feature import FeatureStatus
from backend.app.schemas.feature import (
    FeatureCreate,
    FeatureResponse,
    FeatureUpdate,
    VoteCountResponse,
)
from backend.app.services import features as feature_store
from backend.app.services import stats
from backend.app.services.policies import Caller

router = APIRouter(prefix="/features", tags=["features"])


@router.get("", response_model=list[FeatureResponse])
async def list_features(
    status: FeatureStatus | None = None,
    category: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> list[dict]:
    return await stats.get_features_with_stats(db, status=status, category=category)


@router.post("", response_model=FeatureResponse, status_code=201)
async def create_feature(
    data: FeatureCreate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> dict:
    feature = await feature_store.create_feature(
        db,
        caller,
        title=data.title,
        description=data.description,
        category=data.category,
        status=data.status,
        created_by=data.created_by,
    )
    # A new feature has no votes or comments yet.
    return stats.feature_to_dict(feature)


@router.get("/{feature_id}", response_model=FeatureResponse)
async def get_feature(feature_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    feature = await stats.get_feature_with_stats(db, feature_id)
    if feature is None:
        raise HTTPException(status_code=404, detail="Feature not found")
    return feature


@router.patch("/{feature_id}", response_model=FeatureResponse)
async def update_feature(
    feature_id: str,
    data: FeatureUpdate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> dict:
    updated = await feature_store.update_feature(
        db, caller, feature_id, data.model_dump(exclude_unset=True)
    )
    if updated is None:
        # Missing and not-permitted look the same: zero rows affected.
        raise HTTPException(status_code=404, detail="Feature not found")
    return await stats.get_feature_with_stats(db, feature_id)


@router.get("/{feature_id}/vote-count", response_model=VoteCountResponse)
async def get_vote_count(feature_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    return await stats.get_feature_vote_count(db, feature_id)
