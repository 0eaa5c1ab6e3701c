"""Error taxonomy and the JSON shape every error response takes.

* ``NotFoundError``    -- 404 ``{"error": "<Entity> not found"}``
* ``BadRequestError``  -- 400 ``{"error": ...}`` (extra fields allowed)
* ``InternalError``    -- 500 ``{"error": ..., "message": <exception text>}``
* ``UpstreamError``    -- proxied status and body relayed untouched
* 405 from the router  -- ``{"error": "Method not allowed"}``
* anything unhandled  -- 500 ``{"error": "Internal server error", "message": ...}``
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookkeeper.middleware.http import CORS_HEADERS

logger = logging.getLogger(__name__)


class NotFoundError(HTTPException):
    def __init__(self, entity: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")


class BadRequestError(HTTPException):
    def __init__(self, error: str, **extra: Any) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={**extra, "error": error},
        )


class InternalError(HTTPException):
    """Catch-all 500; the underlying exception text is echoed to the caller."""

    def __init__(self, error: str, exc: BaseException) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": error, "message": str(exc)},
        )


class UpstreamError(Exception):
    """A non-2xx answer from the upstream backend, relayed as-is."""

    def __init__(self, status_code: int, content: bytes, media_type: str | None) -> None:
        super().__init__(f"Upstream responded with {status_code}")
        self.status_code = status_code
        self.content = content
        self.media_type = media_type


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        body: Any = {"error": "Method not allowed"}
    elif isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"error": exc.detail}
    return JSONResponse(body, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def upstream_error_handler(request: Request, exc: UpstreamError) -> Response:
    logger.warning(f"Relaying upstream {exc.status_code} for {request.url.path}")
    return Response(content=exc.content, status_code=exc.status_code, media_type=exc.media_type)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort 500.

    Starlette runs this outside every user middleware, so the CORS headers
    are attached here.
    """
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        {"error": "Internal server error", "message": str(exc)},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
