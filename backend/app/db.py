import logging
from datetime import UTC, datetime

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from backend.app.config import DATA_DIR, DATABASE_URL, settings

logger = logging.getLogger(__name__)

STATS_VIEW_NAME = "feature_with_stats"


class Base(DeclarativeBase):
    pass


def utcnow() -> str:
    """Current UTC time as an ISO 8601 string (the timestamp format of every table)."""
    return datetime.now(UTC).isoformat()


def enable_sqlite_pragmas(target: AsyncEngine) -> None:
    """Apply per-connection SQLite pragmas.

    ``foreign_keys`` is off by default in SQLite and has to be switched on for
    every new connection, otherwise ``ON DELETE CASCADE`` is silently ignored.
    """
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target.sync_engine, "connect")
    def _set_pragmas(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA busy_timeout = 5000")
        cursor.close()


engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
enable_sqlite_pragmas(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncSession:
    """FastAPI dependency for database sessions."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_schema(target: AsyncEngine) -> None:
    """Create all tables, indexes and the stats view on ``target``."""
    import backend.app.models  # noqa: F401 (registers the models)
    from backend.app.services.stats import features_with_stats_query

    async with target.begin() as conn:
        if conn.dialect.name == "sqlite":
            await conn.exec_driver_sql("PRAGMA journal_mode = WAL")
            await conn.exec_driver_sql("PRAGMA synchronous = NORMAL")

        await conn.run_sync(Base.metadata.create_all)

        # The view is recreated on every start so it always matches the
        # aggregation expression the query builders use.
        view_sql = features_with_stats_query().compile(
            dialect=conn.dialect,
            compile_kwargs={"literal_binds": True},
        )
        await conn.exec_driver_sql(f"DROP VIEW IF EXISTS {STATS_VIEW_NAME}")
        await conn.exec_driver_sql(f"CREATE VIEW {STATS_VIEW_NAME} AS {view_sql}")


async def drop_schema(target: AsyncEngine) -> None:
    """Drop the stats view and every table on ``target``."""
    import backend.app.models  # noqa: F401

    async with target.begin() as conn:
        await conn.exec_driver_sql(f"DROP VIEW IF EXISTS {STATS_VIEW_NAME}")
        await conn.run_sync(Base.metadata.drop_all)


async def init_db() -> None:
    """Create the schema and optionally seed demo data."""
    if DATABASE_URL.startswith("sqlite"):
        DATA_DIR.mkdir(parents=True, exist_ok=True)

    await create_schema(engine)
    logger.info("Database ready at %s", DATABASE_URL)

    if settings.seed_demo_data:
        await _seed_defaults()


async def _seed_defaults() -> None:
    """Create a demo admin and a handful of backlog features."""
    import uuid

    from sqlalchemy import select

    from backend.app.models.feature import Feature
    from backend.app.models.user import User

    async with async_session() as session:
        feature_check = await session.execute(select(Feature).limit(1))
        if feature_check.scalar_one_or_none() is not None:
            return

        admin = User(
            id=str(uuid.uuid4()),
            email="admin@example.com",
            display_name="Board Admin",
            role=settings.admin_role,
        )
        session.add(admin)
        await session.flush()  # Ensure admin.id is referenceable

        seed_features = [
            ("Dark mode", "A dark theme for the whole app.", "ui"),
            ("CSV export", "Export any list view as CSV.", "data"),
            ("Keyboard shortcuts", "Navigate the board without a mouse.", "ui"),
            ("Email digests", "A weekly summary of top-voted features.", "notifications"),
        ]
        for title, desc, category in seed_features:
            session.add(
                Feature(
                    title=title,
                    description=desc,
                    category=category,
                    created_by=admin.id,
                )
            )

        await session.commit()
        logger.info("Seeded %d demo features", len(seed_features))
