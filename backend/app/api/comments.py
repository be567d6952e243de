"""Comment endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.deps import require_caller
from backend.app.db import get_db
from backend.app.models.feature import FeatureComment
from backend.app.schemas.feature import CommentCreate, CommentResponse, CommentUpdate
from backend.app.services import comments as comment_store
from backend.app.services.policies import Caller

router = APIRouter(tags=["comments"])


@router.get("/features/{feature_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    feature_id: str, db: AsyncSession = Depends(get_db)
) -> list[FeatureComment]:
    return await comment_store.list_comments(db, feature_id)


@router.post(
    "/features/{feature_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
async def add_comment(
    feature_id: str,
    data: CommentCreate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> FeatureComment:
    return await comment_store.add_comment(
        db, caller, feature_id, data.content, user_id=data.user_id
    )


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: str,
    data: CommentUpdate,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> FeatureComment:
    comment = await comment_store.edit_comment(db, caller, comment_id, data.content)
    if comment is None:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.delete("/comments/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: str,
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> None:
    if not await comment_store.delete_comment(db, caller, comment_id):
        raise HTTPException(status_code=404, detail="Comment not found")
