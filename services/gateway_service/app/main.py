"""FastAPI application entrypoint for the FaithLink360 gateway service.

The gateway exposes the public ``/api/*`` surface and forwards each request
to the service that owns it.
"""

from __future__ import annotations

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from services.gateway_service.app import clients

logger = get_logger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    app = FastAPI(
        title="FaithLink360 Gateway Service",
        version="0.1.0",
        description="API Gateway that fronts the FaithLink360 services.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app, service_name="gateway")

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    # ==================================================================
    # MEMBERS SERVICE PROXY
    # ==================================================================
    @app.api_route("/api/members", methods=PROXY_METHODS)
    @app.api_route("/api/members/{path:path}", methods=PROXY_METHODS)
    async def proxy_members(request: Request):
        """Proxy all /api/members/* requests to members service."""
        path = request.path_params.get("path", "")
        return await proxy_request(clients.members_client, f"/members/{path}", request)

    @app.api_route("/api/groups", methods=PROXY_METHODS)
    @app.api_route("/api/groups/{path:path}", methods=PROXY_METHODS)
    async def proxy_groups(request: Request):
        """Proxy all /api/groups/* requests to members service."""
        path = request.path_params.get("path", "")
        return await proxy_request(clients.members_client, f"/groups/{path}", request)

    @app.api_route("/api/events", methods=PROXY_METHODS)
    @app.api_route("/api/events/{path:path}", methods=PROXY_METHODS)
    async def proxy_events(request: Request):
        """Proxy all /api/events/* requests to members service."""
        path = request.path_params.get("path", "")
        return await proxy_request(clients.members_client, f"/events/{path}", request)

    @app.api_route("/api/attendance", methods=PROXY_METHODS)
    @app.api_route("/api/attendance/{path:path}", methods=PROXY_METHODS)
    async def proxy_attendance(request: Request):
        """Proxy all /api/attendance/* requests to members service."""
        path = request.path_params.get("path", "")
        return await proxy_request(
            clients.members_client, f"/attendance/{path}", request
        )

    @app.api_route("/api/care", methods=PROXY_METHODS)
    @app.api_route("/api/care/{path:path}", methods=PROXY_METHODS)
    async def proxy_care(request: Request):
        """Proxy all /api/care/* requests to members service."""
        path = request.path_params.get("path", "")
        return await proxy_request(clients.members_client, f"/care/{path}", request)

    # ==================================================================
    # VOLUNTEER SERVICE PROXY
    # ==================================================================
    @app.api_route("/api/volunteers", methods=PROXY_METHODS)
    @app.api_route("/api/volunteers/{path:path}", methods=PROXY_METHODS)
    async def proxy_volunteers(request: Request):
        """Proxy all /api/volunteers/* requests to volunteer service."""
        path = request.path_params.get("path", "")
        return await proxy_request(
            clients.volunteer_client, f"/volunteers/{path}", request
        )

    @app.api_route("/api/volunteer-opportunities", methods=PROXY_METHODS)
    @app.api_route("/api/volunteer-opportunities/{path:path}", methods=PROXY_METHODS)
    async def proxy_opportunities(request: Request):
        """Proxy all /api/volunteer-opportunities/* requests to volunteer service."""
        path = request.path_params.get("path", "")
        return await proxy_request(
            clients.volunteer_client, f"/volunteer-opportunities/{path}", request
        )

    return app


def _filter_service_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    """Strip hop-by-hop headers that FastAPI/starlette manages."""
    hop_by_hop = {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailers",
        "transfer-encoding",
        "upgrade",
        "content-length",
        "content-encoding",
        "host",
        "content-type",
    }
    return [(k, v) for k, v in headers.items() if k.lower() not in hop_by_hop]


async def proxy_request(client: clients.ServiceClient, path: str, request: Request):
    """Forward the incoming request to a service and relay its response.

    Method, query string, body and headers are passed through unchanged.
    Service error responses are relayed with their status code; a service
    that cannot be reached is a 503.
    """
    content_body = None
    if request.method in ["POST", "PATCH", "PUT"]:
        body_bytes = await request.body()
        if body_bytes:
            content_body = body_bytes

    # Content-Length and Host are set by httpx
    headers = {
        k: v
        for k, v in request.headers.items()
        if k.lower() not in ["content-length", "host"]
    }

    query_params = request.url.query
    if query_params:
        path = f"{path}?{query_params}"

    try:
        if request.method == "GET":
            service_response = await client.get(path, headers=headers)
        elif request.method == "POST":
            service_response = await client.post(
                path, content=content_body, headers=headers
            )
        elif request.method == "PUT":
            service_response = await client.put(
                path, content=content_body, headers=headers
            )
        elif request.method == "PATCH":
            service_response = await client.patch(
                path, content=content_body, headers=headers
            )
        elif request.method == "DELETE":
            service_response = await client.delete(path, headers=headers)
        else:
            raise HTTPException(status_code=405, detail="Method not allowed")
    except httpx.RequestError as e:
        logger.warning("Service request %s %s failed: %s", request.method, path, e)
        raise HTTPException(status_code=503, detail="Service unavailable")

    forward_headers = dict(_filter_service_headers(service_response.headers))

    if service_response.status_code == 204:
        return Response(status_code=204, headers=forward_headers)

    content_type = service_response.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            payload = service_response.json()
            return JSONResponse(
                content=payload,
                status_code=service_response.status_code,
                headers=forward_headers,
            )
        except ValueError:
            # Fall back to raw bytes if the payload is not valid JSON.
            pass

    return Response(
        content=service_response.content,
        status_code=service_response.status_code,
        media_type=content_type or None,
        headers=forward_headers,
    )


app = create_app()
