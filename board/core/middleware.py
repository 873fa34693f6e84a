"""HTTP middleware for request correlation and access logging.

Every request/response pair:
- Accepts an incoming X-Request-ID header or generates a UUID
- Stores request_id in contextvars so every log line can carry it
- Returns the id and total duration in response headers
- Emits a single ``http.request`` access log line

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from board.core.logging import clear_request_id, set_request_id

logger = logging.getLogger("board.access")


async def request_id_middleware(request: Request, call_next) -> Response:
    """Assign a correlation id, time the request and log its outcome.

    The header name comes from ``settings.log.request_id_header`` held on
    ``app.state``.
    """

    header_name = request.app.state.settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    # Outlives the contextvar so the 500 fallback handler can still report it
    request.state.request_id = request_id
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "request_id": request_id,
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
