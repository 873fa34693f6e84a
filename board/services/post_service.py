"""Post use cases: validation, rate limiting and persistence.

Create is the only rate-limited operation. Input is validated before the
limiter is consulted, so a rejected submission never consumes quota.
"""

from __future__ import annotations

import logging

from board.adapters.rate_limit.base import AbstractRateLimiter
from board.adapters.storage.base import AbstractPostRepository
from board.core.errors import NotFoundAppError, RateLimitAppError, ValidationAppError
from board.schemas.post import Post

logger = logging.getLogger(__name__)


def _format_window(window_seconds: float) -> str:
    if window_seconds == 3600:
        return "hour"
    if window_seconds == 60:
        return "minute"
    if window_seconds == 86400:
        return "day"
    return f"{window_seconds:g} seconds"


class PostService:
    """Bulletin-board operations over a repository and a rate limiter.

    Args:
        repository: Post store.
        rate_limiter: Limiter gating post creation, or None to disable limiting.
    """

    def __init__(
        self,
        repository: AbstractPostRepository,
        rate_limiter: AbstractRateLimiter | None = None,
    ) -> None:
        self._repository = repository
        self._rate_limiter = rate_limiter

    @property
    def repository(self) -> AbstractPostRepository:
        return self._repository

    @property
    def rate_limiter(self) -> AbstractRateLimiter | None:
        return self._rate_limiter

    @staticmethod
    def _validate(title: str, body: str) -> tuple[str, str]:
        """Return title and body with surrounding whitespace removed.

        Raises:
            ValidationAppError: Either field is blank.
        """
        title, body = title.strip(), body.strip()
        empty = [name for name, value in (("title", title), ("body", body)) if not value]
        if empty:
            raise ValidationAppError(
                code="empty_fields",
                message="Title and body cannot be empty",
                details={"fields": empty},
            )
        return title, body

    def list_posts(self) -> list[Post]:
        return self._repository.list_recent()

    def get_post(self, post_id: int) -> Post:
        post = self._repository.get(post_id)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"post_id": post_id},
            )
        return post

    def create_post(self, *, title: str, body: str, user: str) -> Post:
        """Validate, charge the author's quota, then persist.

        Raises:
            ValidationAppError: Title or body is empty.
            RateLimitAppError: The author exhausted its quota.
            StorageAppError: The store failed.
        """
        title, body = self._validate(title, body)
        self._enforce_rate_limit(user)

        post = self._repository.create(title=title, body=body, user=user)
        logger.info("post.created", extra={"post_id": post.id, "user": user})
        return post

    def update_post(self, post_id: int, *, title: str, body: str) -> Post:
        title, body = self._validate(title, body)

        post = self._repository.update(post_id, title=title, body=body)
        if post is None:
            raise NotFoundAppError(
                code="post_not_found",
                message="Post not found",
                details={"post_id": post_id},
            )
        logger.info("post.updated", extra={"post_id": post.id, "user": post.user})
        return post

    def delete_post(self, post_id: int) -> bool:
        """Delete a post; deleting a missing post is a no-op.

        Returns:
            True if a row was removed.
        """
        deleted = self._repository.delete(post_id)
        if deleted:
            logger.info("post.deleted", extra={"post_id": post_id})
        else:
            logger.info("post.delete_missing", extra={"post_id": post_id})
        return deleted

    def _enforce_rate_limit(self, user: str) -> None:
        limiter = self._rate_limiter
        if limiter is None:
            return

        if limiter.allow(user):
            logger.debug("rate_limit.allowed", extra={"user": user, "limit": limiter.limit})
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "user": user,
                "limit": limiter.limit,
                "window_s": limiter.window_seconds,
            },
        )
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message=(
                f"Rate limit exceeded. Maximum {limiter.limit} posts per "
                f"{_format_window(limiter.window_seconds)}."
            ),
            details={"limit": limiter.limit, "window_seconds": limiter.window_seconds},
        )
