from __future__ import annotations

"""Application factory for the bulletin board.

Collaborators (post store, rate limiter, identity deriver) are built once
here and placed on ``app.state``; request handlers receive them through
FastAPI dependencies. Tests pass their own instances in.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from board.adapters.rate_limit.base import AbstractRateLimiter
from board.adapters.storage.base import AbstractPostRepository
from board.adapters.storage.sqlalchemy_repository import SqlAlchemyPostRepository
from board.api.routes import health_router, posts_router
from board.core.config import Settings, settings as default_settings
from board.core.exception_handlers import setup_exception_handlers
from board.core.identity import AddressHashIdentity, IdentityDeriver
from board.core.logging import configure_logging
from board.core.middleware import request_id_middleware
from board.core.rate_limit import build_rate_limiter
from board.core.views import STATIC_DIR

logger = logging.getLogger(__name__)

_UNSET = object()


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Verify the store is reachable and its schema exists before serving."""
    repository: AbstractPostRepository = app.state.repository
    repository.ping()
    repository.init_schema()
    logger.info("board.started", extra={"app_env": app.state.settings.app_env})
    yield
    logger.info("board.stopped")


def create_app(
    settings: Settings | None = None,
    *,
    repository: AbstractPostRepository | None = None,
    rate_limiter: AbstractRateLimiter | None | object = _UNSET,
    identity: IdentityDeriver | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        settings: Settings to use; the global settings when omitted.
        repository: Post store; built from ``settings.database`` when omitted.
        rate_limiter: Limiter for post creation; built from settings when
            omitted. Pass None explicitly to disable limiting.
        identity: Identity deriver; address hashing when omitted.
        configure_logs: Whether to (re)configure root logging.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    cfg = settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log)

    app = FastAPI(
        title="Bulletin Board",
        description=(
            "Server-rendered bulletin board. Visitors post short messages; "
            "authorship is a fingerprint of the requester address and post "
            "creation is rate limited per fingerprint."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.repository = repository or SqlAlchemyPostRepository.from_url(
        cfg.database.url, echo=cfg.database.echo
    )
    app.state.rate_limiter = (
        build_rate_limiter(cfg.app) if rate_limiter is _UNSET else rate_limiter
    )
    app.state.identity = identity or AddressHashIdentity(cfg.app.identity_prefix_bytes)

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(cfg.app.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(posts_router)
    app.include_router(health_router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app
