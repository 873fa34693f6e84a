from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from board.adapters.storage.base import AbstractPostRepository
from board.api.dependencies import get_repository

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe; answers without touching the post store."""

    return {"status": "ok"}


@router.get("/health/ready")
def readiness_check(
    repository: Annotated[AbstractPostRepository, Depends(get_repository)],
) -> dict:
    """Readiness probe.

    Round-trips to the post store; a failure surfaces as the standard 500
    storage error response.
    """

    repository.ping()
    return {"status": "ready"}
