from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db import Base, utcnow


class User(Base):
    """Local mirror of an identity-provider account.

    Only the id and the role attribute matter to the authorization layer;
    the profile fields are informational.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    display_name: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    # Free-form role attribute from the identity provider's user metadata.
    # Only settings.admin_role carries extra privileges.
    role: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    # Timestamps are stored as ISO 8601 strings (not datetime columns) throughout
    # the schema. This avoids timezone/serialization issues with SQLite and keeps
    # JSON output consistent.
    created_at: Mapped[str] = mapped_column(String, nullable=False, default=utcnow)
