"""API router for v1 endpoints."""

from fastapi import APIRouter

from app.api import projects, readiness

router = APIRouter()

# Readiness routes (read, refresh, invalidate, finalize, feature gates)
router.include_router(readiness.router, tags=["readiness"])

# Project lifecycle routes gated by readiness
router.include_router(projects.router, prefix="/projects", tags=["projects"])
