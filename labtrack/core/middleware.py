"""CORS and request-tracing middleware."""

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from labtrack.core.config import Settings

logger = logging.getLogger("labtrack.http")

REQUEST_ID_HEADER = "X-Request-Id"
_QUIET_PATHS = frozenset({"/api/health"})


class RequestTraceMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one access line per response.

    An id supplied by an upstream proxy is reused so a request can be followed
    across hops; otherwise a fresh one is generated.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = (request.headers.get(REQUEST_ID_HEADER) or "")[:64] or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)

        if response.status_code >= 500:
            level = logging.WARNING
        elif request.url.path in _QUIET_PATHS:
            level = logging.DEBUG
        else:
            level = logging.INFO
        logger.log(
            level,
            "[%s] %s %s -> %s (%sms)",
            request_id, request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER, "Content-Disposition"],
    )
    app.add_middleware(RequestTraceMiddleware)
