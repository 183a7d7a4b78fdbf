"""Request tracing and error-translation middlewares."""
from __future__ import annotations

import uuid
from typing import Awaitable, Callable

import structlog
from aiohttp import web

from metric_charts_service.api.utils import error_payload
from metric_charts_service.core.exceptions import ServiceError

logger = structlog.get_logger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

REQUEST_ID_HEADER = "X-Request-ID"


def create_trace_middleware(service_name: str):
    """Bind a request id and service name to every log line of a request."""

    @web.middleware
    async def trace_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            service=service_name,
            request_id=request_id,
            method=request.method,
            path=request.path,
        )
        try:
            response = await handler(request)
        except web.HTTPException as exc:
            exc.headers[REQUEST_ID_HEADER] = request_id
            raise
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    return trace_middleware


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Resolve service errors into JSON responses with their documented status."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ServiceError as exc:
        if exc.status_code >= 500:
            logger.exception("request_failed", error=exc.message)
        else:
            logger.warning("request_rejected", status=exc.status_code, error=exc.message)
        return web.json_response(error_payload(exc.message), status=exc.status_code)
    except Exception:
        logger.exception("unhandled_error")
        return web.json_response(error_payload("Internal server error"), status=500)
