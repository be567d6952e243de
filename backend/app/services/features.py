"""Feature store: create, read and permission-gated update.

There is no delete operation. Features only disappear when their creator is
removed from the identity provider (see ``identity.purge_user``).
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db import utcnow
from backend.app.models.feature import Feature, FeatureStatus
from backend.app.services import policies
from backend.app.services.errors import ConstraintViolation, flush
from backend.app.services.policies import FEATURES, Action, Caller

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"title", "description", "status", "category"})


async def create_feature(
    db: AsyncSession,
    caller: Caller,
    *,
    title: str,
    description: str | None = None,
    category: str | None = None,
    status: FeatureStatus | str | None = None,
    created_by: str | None = None,
) -> Feature:
    """Insert a feature owned by ``created_by`` (the caller when omitted).

    Raises AuthorizationDenied when ``created_by`` is not the caller.
    """
    owner = created_by if created_by is not None else caller.user_id
    policies.check(caller, FEATURES, Action.insert, {"created_by": owner})

    if not title:
        raise ConstraintViolation('null value in column "title" violates not-null constraint')

    feature = Feature(
        title=title,
        description=description,
        category=category,
        status=FeatureStatus(status) if status else FeatureStatus.backlog,
        created_by=owner,
    )
    db.add(feature)
    await flush(db)

    logger.info("Feature %s created by %s: %s", feature.id, owner, feature.title)
    return feature


async def update_feature(
    db: AsyncSession,
    caller: Caller,
    feature_id: str,
    changes: dict[str, Any],
) -> Feature | None:
    """Apply ``changes`` if the caller created the feature or is an admin.

    Returns the updated feature, or None when no row was affected (missing
    feature or policy denied). Status values may change in any order.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ConstraintViolation(
            f"Cannot update feature fields: {', '.join(sorted(unknown))}"
        )

    feature = await db.get(Feature, feature_id)
    if feature is None:
        return None
    if not policies.is_allowed(caller, FEATURES, Action.update, feature):
        return None

    for required in ("title", "status"):
        if required in changes and not changes[required]:
            raise ConstraintViolation(
                f'null value in column "{required}" violates not-null constraint'
            )
    if "status" in changes:
        changes = {**changes, "status": FeatureStatus(changes["status"])}

    for field, value in changes.items():
        setattr(feature, field, value)
    feature.updated_at = utcnow()
    await flush(db)

    logger.info("Feature %s updated by %s (%s)", feature.id, caller.user_id, ", ".join(changes))
    return feature
