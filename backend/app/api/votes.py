"""Vote endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.deps import require_caller
from backend.app.db import get_db
from backend.app.models.feature import FeatureVote
from backend.app.schemas.feature import FeatureVoteCreate, FeatureVoteResponse, FeatureVoteUpdate
from backend.app.services import votes as vote_store
from backend.app.services.policies import Caller

router = APIRouter(tags=["votes"])


@router.get("/features/{feature_id}/votes", response_model=list[FeatureVoteResponse])
async def list_votes(feature_id: str, db: AsyncSession = Depends(get_db)) -> list[FeatureVote]:
    return await vote_store.list_votes(db, feature_id)


@router.get("/features/{feature_id}/votes/me", response_model=FeatureVoteResponse)
async def get_my_vote(
    feature_id: str,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> FeatureVote:
    """The caller's vote on this feature, so clients know which row to change."""
    vote = await vote_store.get_user_vote(db, feature_id, caller.user_id)
    if vote is None:
        raise HTTPException(status_code=404, detail="No vote on this feature")
    return vote


@router.post(
    "/features/{feature_id}/votes",
    response_model=FeatureVoteResponse,
    status_code=201,
)
async def cast_vote(
    feature_id: str,
    data: FeatureVoteCreate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> FeatureVote:
    return await vote_store.cast_vote(
        db, caller, feature_id, vote_type=data.vote_type, user_id=data.user_id
    )


@router.patch("/votes/{vote_id}", response_model=FeatureVoteResponse)
async def change_vote(
    vote_id: str,
    data: FeatureVoteUpdate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> FeatureVote:
    vote = await vote_store.change_vote(db, caller, vote_id, data.vote_type)
    if vote is None:
        raise HTTPException(status_code=404, detail="Vote not found")
    return vote


@router.delete("/votes/{vote_id}", status_code=204)
async def retract_vote(
    vote_id: str,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> None:
    if not await vote_store.retract_vote(db, caller, vote_id):
        raise HTTPException(status_code=404, detail="Vote not found")
