"""Row-level authorization policies.

Every (table, action) pair has zero or more permissive policies. An action is
allowed when at least one of its policies accepts the caller and the target
row; a pair with no policies is always denied. Predicates are pure functions
of the caller and the row, so they can be evaluated before any statement is
issued.
"""

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from backend.app.config import settings
from backend.app.models.feature import Feature, FeatureComment, FeatureVote
from backend.app.services.errors import AuthorizationDenied

logger = logging.getLogger(__name__)

FEATURES = Feature.__tablename__
VOTES = FeatureVote.__tablename__
COMMENTS = FeatureComment.__tablename__


class Action(enum.StrEnum):
    select = "select"
    insert = "insert"
    update = "update"
    delete = "delete"


@dataclass(frozen=True)
class Caller:
    """The authenticated identity a statement runs as."""

    user_id: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Caller()

Predicate = Callable[[Caller, Any], bool]


@dataclass(frozen=True)
class Policy:
    name: str
    table: str
    action: Action
    predicate: Predicate


def _field(row: Any, column: str) -> Any:
    if row is None:
        return None
    if isinstance(row, Mapping):
        return row.get(column)
    return getattr(row, column, None)


def allow_all(caller: Caller, row: Any) -> bool:
    return True


def owned_by(column: str) -> Predicate:
    """Predicate: the caller's identity equals ``row[column]``."""

    def _predicate(caller: Caller, row: Any) -> bool:
        return caller.is_authenticated and caller.user_id == _field(row, column)

    _predicate.__name__ = f"owned_by_{column}"
    return _predicate


def is_admin(caller: Caller, row: Any) -> bool:
    return caller.is_authenticated and caller.role == settings.admin_role


_own_feature = owned_by("created_by")
_own_row = owned_by("user_id")

POLICIES: tuple[Policy, ...] = (
    # Features: public read, creators write their own, admins update any.
    # There is deliberately no delete policy.
    Policy("Anyone can view features", FEATURES, Action.select, allow_all),
    Policy("Authenticated users can create features", FEATURES, Action.insert, _own_feature),
    Policy("Users can update their own features", FEATURES, Action.update, _own_feature),
    Policy("Admins can update any feature", FEATURES, Action.update, is_admin),
    # Votes
    Policy("Anyone can view votes", VOTES, Action.select, allow_all),
    Policy("Authenticated users can vote", VOTES, Action.insert, _own_row),
    Policy("Users can update their own votes", VOTES, Action.update, _own_row),
    Policy("Users can delete their own votes", VOTES, Action.delete, _own_row),
    # Comments: no moderator override.
    Policy("Anyone can view comments", COMMENTS, Action.select, allow_all),
    Policy("Authenticated users can comment", COMMENTS, Action.insert, _own_row),
    Policy("Users can update their own comments", COMMENTS, Action.update, _own_row),
    Policy("Users can delete their own comments", COMMENTS, Action.delete, _own_row),
)


def policies_for(table: str, action: Action) -> list[Policy]:
    return [p for p in POLICIES if p.table == table and p.action == action]


def is_allowed(caller: Caller, table: str, action: Action, row: Any = None) -> bool:
    """True if any permissive policy for (table, action) accepts the row."""
    for policy in policies_for(table, action):
        if policy.predicate(caller, row):
            return True
    logger.debug("Policy denied %s on %s for caller %s", action, table, caller.user_id)
    return False


def check(caller: Caller, table: str, action: Action, row: Any = None) -> None:
    """Like :func:`is_allowed` but raises :class:`AuthorizationDenied`."""
    if not is_allowed(caller, table, action, row):
        raise AuthorizationDenied(
            f'new row violates row-level security policy for table "{table}"'
        )
