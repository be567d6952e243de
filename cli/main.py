import asyncio

import typer
import uvicorn

from backend.app.config import settings
from backend.app.models.feature import FeatureStatus

app = typer.Typer(help="Feature Board - vote on what gets built next")


@app.command()
def start(reload: bool = typer.Option(False, help="Reload on code changes.")) -> None:
    """Start the feature board server."""
    typer.echo(f"Starting Feature Board on {settings.host}:{settings.port}...")
    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=reload,
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create tables, indexes and the stats view."""
    from backend.app.db import init_db

    asyncio.run(init_db())
    typer.echo(f"Database initialised at {settings.database_url}")


@app.command()
def stats(
    status: FeatureStatus | None = typer.Option(None, help="Only features with this status."),
    category: str | None = typer.Option(None, help="Only features in this category."),
) -> None:
    """Print every feature with its vote and comment counts."""
    from backend.app.db import async_session
    from backend.app.services.stats import get_features_with_stats

    async def _load() -> list[dict]:
        async with async_session() as session:
            return await get_features_with_stats(session, status=status, category=category)

    rows = asyncio.run(_load())
    if not rows:
        typer.echo("No features.")
        return

    typer.echo(f"{'NET':>5} {'UP':>4} {'DOWN':>4} {'COMM':>4}  {'STATUS':<12} TITLE")
    for row in sorted(rows, key=lambda r: r["net_votes"], reverse=True):
        typer.echo(
            f"{row['net_votes']:>5} {row['upvotes']:>4} {row['downvotes']:>4} "
            f"{row['comment_count']:>4}  {row['status']:<12} {row['title']}"
        )


if __name__ == "__main__":
    app()
