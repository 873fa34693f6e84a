"""Rate limiter wiring.

The limiter is built once per application from settings and kept on
``app.state``; request handlers reach it through ``get_rate_limiter`` rather
than a module-level global.

Strategy:
- Sliding window per identity fingerprint (see ``board.core.identity``).
- Only post creation is charged.
- Disabled entirely when ``APP_RATE_LIMIT_ENABLED=false``.
"""

from __future__ import annotations

import logging

from fastapi import Request

from board.adapters.rate_limit.base import AbstractRateLimiter
from board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from board.core.config import AppSettings

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: AppSettings) -> AbstractRateLimiter | None:
    """Create the process-wide limiter, or None when limiting is disabled.

    Args:
        app_settings: Application settings carrying the rate limit knobs.

    Returns:
        Configured limiter instance, or None.
    """

    if not app_settings.rate_limit_enabled:
        logger.info("rate_limit.disabled")
        return None

    limiter = InMemorySlidingWindowRateLimiter(
        limit=app_settings.rate_limit_posts,
        window_seconds=app_settings.rate_limit_window_seconds,
        sweep_interval_seconds=app_settings.rate_limit_sweep_seconds,
    )
    logger.info(
        "rate_limit.configured",
        extra={
            "limit": app_settings.rate_limit_posts,
            "window_s": app_settings.rate_limit_window_seconds,
            "sweep_s": app_settings.rate_limit_sweep_seconds,
        },
    )
    return limiter


def get_rate_limiter(request: Request) -> AbstractRateLimiter | None:
    """FastAPI dependency returning the application's limiter."""

    return request.app.state.rate_limiter
