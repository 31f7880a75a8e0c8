"""Members service routers package."""

from services.members_service.routers.attendance import router as attendance_router
from services.members_service.routers.care import router as care_router
from services.members_service.routers.events import router as events_router
from services.members_service.routers.groups import router as groups_router
from services.members_service.routers.members import router as members_router

__all__ = [
    "members_router",
    "groups_router",
    "events_router",
    "attendance_router",
    "care_router",
]
