"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When a new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import (
    members,
    meetings,
    rotation,
    announcements,
    audit,
    data,
    statistics,
    health,
)

router = APIRouter()

router.include_router(members.router, prefix="/members", tags=["members"])
router.include_router(meetings.router, prefix="/meetings", tags=["meetings"])
router.include_router(rotation.router, prefix="/rotation", tags=["rotation"])
router.include_router(announcements.router, prefix="/announcements", tags=["announcements"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
router.include_router(data.router, prefix="/data", tags=["data"])
router.include_router(statistics.router, prefix="/statistics", tags=["statistics"])
router.include_router(health.router, tags=["health"])
