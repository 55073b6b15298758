import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _error_body(detail: Any) -> dict[str, Any]:
    # Structured details (e.g. access denials) keep every key so clients can
    # act on redirect metadata without a second request.
    if isinstance(detail, dict):
        body = dict(detail)
        body.setdefault("code", "http_error")
        body.setdefault("message", "Request failed")
        return body
    if isinstance(detail, str):
        return {"code": detail, "message": detail}
    return {"code": "http_error", "message": str(detail)}


def _envelope(request: Request, status_code: int, body: dict[str, Any], headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": body,
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


async def http_exception_envelope_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return _envelope(request, exc.status_code, _error_body(exc.detail), getattr(exc, "headers", None))


async def error_envelope_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    try:
        return await call_next(request)
    except StarletteHTTPException as exc:
        return _envelope(request, exc.status_code, _error_body(exc.detail), exc.headers)
    except Exception:
        logger.exception("Unhandled exception")
        return _envelope(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"code": "internal_error", "message": "An unexpected error occurred"},
        )
