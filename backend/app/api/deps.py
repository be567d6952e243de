"""Request-scoped dependencies: who is calling."""

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.config import settings
from backend.app.db import get_db
from backend.app.services.identity import resolve_caller
from backend.app.services.policies import Caller

logger = logging.getLogger(__name__)


async def get_caller(request: Request, db: AsyncSession = Depends(get_db)) -> Caller:
    """Resolve the caller from the identity header (anonymous when absent)."""
    user_id = (request.headers.get(settings.user_header) or "").strip() or None
    return await resolve_caller(db, user_id)


async def require_caller(caller: Caller = Depends(get_caller)) -> Caller:
    if not caller.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.user_header} header",
        )
    return caller


async def require_internal(request: Request) -> None:
    """Guard for the identity-provider hooks: a shared token, compared in constant time."""
    expected = settings.internal_token
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Internal hooks are disabled (no internal token configured)",
        )
    supplied = request.headers.get(settings.internal_token_header) or ""
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        logger.warning("Rejected internal call to %s: bad token", request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Invalid {settings.internal_token_header} header",
        )
