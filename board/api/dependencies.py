"""FastAPI dependencies resolving collaborators from ``app.state``."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from board.adapters.rate_limit.base import AbstractRateLimiter
from board.adapters.storage.base import AbstractPostRepository
from board.core.rate_limit import get_rate_limiter
from board.services.post_service import PostService


def get_repository(request: Request) -> AbstractPostRepository:
    return request.app.state.repository


def get_post_service(
    repository: Annotated[AbstractPostRepository, Depends(get_repository)],
    rate_limiter: Annotated[AbstractRateLimiter | None, Depends(get_rate_limiter)],
) -> PostService:
    return PostService(repository, rate_limiter)
