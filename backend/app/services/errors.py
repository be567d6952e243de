"""Error taxonomy shared by the stores.

Routers translate these to HTTP status codes; nothing below the router
retries or rewrites them.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession


class FeatureBoardError(Exception):
    """Base class for store-level failures."""


class ConstraintViolation(FeatureBoardError):
    """A uniqueness, foreign-key or required-field constraint rejected the write."""


class AuthorizationDenied(FeatureBoardError):
    """An insert policy evaluated false for the caller."""


class NotFound(FeatureBoardError):
    """A referenced feature or user does not exist."""


async def flush(db: AsyncSession) -> None:
    """Flush pending writes, reporting constraint failures as :class:`ConstraintViolation`."""
    try:
        await db.flush()
    except IntegrityError as exc:
        raise ConstraintViolation(str(exc.orig)) from exc
