"""FastAPI application for the Members Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.members_service.routers import (
    attendance_router,
    care_router,
    events_router,
    groups_router,
    members_router,
)


def create_app() -> FastAPI:
    """Create and configure the Members Service FastAPI app."""
    app = FastAPI(
        title="FaithLink360 Members Service",
        version="0.1.0",
        description="Member records, tags, groups, events, attendance and pastoral care.",
    )

    add_observability_middleware(app, service_name="members")
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "members"}

    app.include_router(members_router)
    app.include_router(groups_router)
    app.include_router(events_router)
    app.include_router(attendance_router)
    app.include_router(care_router)

    return app


app = create_app()
