"""Internal endpoints not exposed to clients.

The identity provider calls these to keep the local ``users`` mirror in
sync: account creation/changes and account deletion, which cascades to
everything the user owned. Every call must carry the shared internal token.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.deps import require_internal
from backend.app.db import get_db
from backend.app.models.user import User
from backend.app.schemas.user import UserPurgeResponse, UserResponse, UserSync
from backend.app.services import identity

router = APIRouter(
    prefix="/_internal",
    tags=["internal"],
    dependencies=[Depends(require_internal)],
)


@router.put("/users/{user_id}", response_model=UserResponse)
async def sync_user(
    user_id: str,
    data: UserSync,
    db: AsyncSession = Depends(get_db),
) -> User:
    if data.id != user_id:
        raise HTTPException(status_code=400, detail="User id in body does not match path")
    return await identity.upsert_user(
        db,
        user_id,
        email=data.email,
        display_name=data.display_name,
        role=data.role,
    )


@router.delete("/users/{user_id}", response_model=UserPurgeResponse)
async def user_deleted(user_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    """Account deleted upstream: remove the user and all dependent rows."""
    counts = await identity.purge_user(db, user_id)
    if counts is None:
        raise HTTPException(status_code=404, detail="User not found")
    return {"id": user_id, **counts}
