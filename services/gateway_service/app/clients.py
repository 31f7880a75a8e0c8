"""HTTP clients for gateway to call microservices."""
from typing import Any, Dict, Optional

import httpx
from libs.common.config import get_settings

settings = get_settings()


class ServiceClient:
    """Base client for forwarding HTTP requests to a microservice.

    Responses are returned as-is, error statuses included, so the gateway can
    pass them straight through.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict] = None,
        content: Optional[bytes] = None,
        json: Any = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            return await client.request(
                method,
                f"{self.base_url}{path}",
                headers=headers or {},
                content=content,
                json=json,
            )

    async def get(self, path: str, headers: Optional[Dict] = None) -> httpx.Response:
        return await self._request("GET", path, headers=headers)

    async def post(
        self,
        path: str,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict] = None,
    ) -> httpx.Response:
        return await self._request("POST", path, headers=headers, content=content, json=json)

    async def put(
        self,
        path: str,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict] = None,
    ) -> httpx.Response:
        return await self._request("PUT", path, headers=headers, content=content, json=json)

    async def patch(
        self,
        path: str,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict] = None,
    ) -> httpx.Response:
        return await self._request("PATCH", path, headers=headers, content=content, json=json)

    async def delete(self, path: str, headers: Optional[Dict] = None) -> httpx.Response:
        return await self._request("DELETE", path, headers=headers)


# Service client instances
members_client = ServiceClient(
    settings.MEMBERS_SERVICE_URL, timeout=settings.SERVICE_TIMEOUT_SECONDS
)
volunteer_client = ServiceClient(
    settings.VOLUNTEER_SERVICE_URL, timeout=settings.SERVICE_TIMEOUT_SECONDS
)
