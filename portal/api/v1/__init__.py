"""API v1 router aggregator."""

from fastapi import APIRouter

from portal.api.v1 import (
    announcements,
    assignments,
    dashboard,
    files,
    messages,
    profiles,
    schedules,
    session,
)

api_router = APIRouter(tags=["API v1"])

# Include all API routers
api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
api_router.include_router(session.router, prefix="/session", tags=["Session"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(schedules.router, prefix="/schedules", tags=["Schedules"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
api_router.include_router(files.router, prefix="/files", tags=["Files"])
api_router.include_router(announcements.router, prefix="/announcements", tags=["Announcements"])
api_router.include_router(messages.router, prefix="/messages", tags=["Messages"])
