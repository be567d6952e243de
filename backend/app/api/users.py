"""User profile endpoints (read-only mirror of the identity provider)."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.deps import require_caller
from backend.app.db import get_db
from backend.app.models.user import User
from backend.app.schemas.user import UserResponse
from backend.app.services import identity
from backend.app.services.policies import Caller

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    caller: Caller = Depends(require_caller),
    db: AsyncSession = Depends(get_db),
) -> User:
    user = await identity.get_user(db, caller.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not registered")
    return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)) -> User:
    user = await identity.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
