"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import get_settings
from app.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the readiness engine settings on startup."""
    settings = get_settings()
    logger.info(
        f"Starting readiness engine (env={settings.READINESS_ENV}, "
        f"read_timeout={settings.READINESS_READ_TIMEOUT_SECONDS}s, "
        f"read_workers={settings.READINESS_READ_WORKERS}, "
        f"lookahead_days={settings.READINESS_LOOKAHEAD_DAYS})"
    )
    yield


app = FastAPI(
    title="Production Readiness Engine",
    description="Derived project readiness for talent escort and staff scheduling",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Liveness only; readiness reads are not exercised here."""
    return JSONResponse(content={"status": "ok", "service": "readiness-engine"}, status_code=200)


app.include_router(api_router, prefix="/v1", tags=["v1"])
