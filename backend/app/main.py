"""FastAPI application: the main entrypoint for the feature board."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from backend.app.api.comments import router as comments_router
from backend.app.api.features import router as features_router
from backend.app.api.internal import router as internal_router
from backend.app.api.users import router as users_router
from backend.app.api.votes import router as votes_router
from backend.app.config import settings
from backend.app.db import engine, init_db
from backend.app.services.errors import AuthorizationDenied, ConstraintViolation, NotFound

logger = logging.getLogger(__name__)

# Configure logging for our app modules so INFO/DEBUG logs are visible.
# Uvicorn's log_level="info" only affects its own logger, not ours.
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s:%(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    yield
    await engine.dispose()


app = FastAPI(
    title="Feature Board",
    description="Propose, vote on and discuss feature requests",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Store error translation ---


@app.exception_handler(ConstraintViolation)
async def _constraint_violation_handler(
    request: Request, exc: ConstraintViolation
) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(AuthorizationDenied)
async def _authorization_denied_handler(
    request: Request, exc: AuthorizationDenied
) -> JSONResponse:
    logger.info("Denied %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(NotFound)
async def _not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a clean JSON 500 instead of a stack trace."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Include routers
app.include_router(users_router, prefix="/api")
app.include_router(features_router, prefix="/api")
app.include_router(votes_router, prefix="/api")
app.include_router(comments_router, prefix="/api")
app.include_router(internal_router)  # /_internal prefix (no /api)


# --- Health check ---


@app.get("/api/health")
async def health() -> dict[str, str]:
    """Health check with DB connectivity verification."""
    db_ok = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        db_ok = "error"
        logger.exception("Health check: database connectivity failed")

    return {
        "status": "ok" if db_ok == "ok" else "degraded",
        "database": db_ok,
    }
