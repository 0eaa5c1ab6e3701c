"""Upstream proxy -- relays selected routes to the companion backend."""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

import httpx
from fastapi import Request
from fastapi.responses import Response

from bookkeeper.config import settings
from bookkeeper.errors import InternalError, UpstreamError

logger = logging.getLogger(__name__)


async def get_upstream_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """FastAPI dependency yielding a client bound to ``BACKEND_URL``."""
    async with httpx.AsyncClient(base_url=settings.BACKEND_URL, timeout=30.0) as client:
        yield client


class UpstreamProxy:
    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def forward(self, request: Request, path: str) -> Response:
        """
        Send ``request`` to ``path`` on the upstream backend.

        The ``Authorization`` header and the query string are forwarded.
        A 2xx answer is returned as-is; anything else raises ``UpstreamError``
        carrying the upstream status and body so the caller sees exactly what
        the backend said.  Transport failures become a 500.
        """
        headers = {"Accept": "application/json"}
        authorization = request.headers.get("authorization")
        if authorization:
            headers["Authorization"] = authorization

        body = await request.body()
        if body:
            headers["Content-Type"] = request.headers.get("content-type", "application/json")

        try:
            upstream = await self.client.request(
                request.method,
                path,
                params=request.query_params,
                headers=headers,
                content=body or None,
            )
        except httpx.HTTPError as e:
            logger.error(f"Upstream request to {path} failed: {e}")
            raise InternalError("Failed to reach backend", e)

        media_type = upstream.headers.get("content-type")
        if not upstream.is_success:
            raise UpstreamError(upstream.status_code, upstream.content, media_type)

        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type=media_type,
        )
