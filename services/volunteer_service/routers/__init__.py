"""Volunteer service routers."""

from services.volunteer_service.routers.opportunities import (
    router as opportunities_router,
)
from services.volunteer_service.routers.volunteers import router as volunteers_router

__all__ = [
    "opportunities_router",
    "volunteers_router",
]
