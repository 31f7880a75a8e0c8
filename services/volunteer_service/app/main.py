"""FastAPI application for the Volunteer Service."""

from fastapi import FastAPI
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from services.volunteer_service.routers import opportunities_router, volunteers_router


def create_app() -> FastAPI:
    """Create and configure the Volunteer Service FastAPI app."""
    app = FastAPI(
        title="FaithLink360 Volunteer Service",
        version="0.1.0",
        description="Volunteer profiles, opportunities, signups, hours and matching.",
    )

    add_observability_middleware(app, service_name="volunteer")
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "volunteer"}

    app.include_router(volunteers_router)
    app.include_router(opportunities_router)

    return app


app = create_app()
