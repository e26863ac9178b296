"""Versionless public API router."""

from fastapi import APIRouter

from ayambil.api import deps
from ayambil.core.config import get_settings

from . import admin, calendar, health, submissions

_DEFAULT_RATE_DEP = deps.rate_limit(
    deps.parse_rate(get_settings().rate_limit_default, fallback=(100, 60))
)

router = APIRouter(dependencies=[_DEFAULT_RATE_DEP])
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])

__all__ = ["router"]
