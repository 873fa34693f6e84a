"""Tests for post use cases: validation, rate limiting and not-found handling."""

from unittest.mock import Mock

import pytest

from board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from board.adapters.storage.base import AbstractPostRepository
from board.core.errors import (
    NotFoundAppError,
    RateLimitAppError,
    StorageAppError,
    ValidationAppError,
)
from board.services.post_service import PostService


@pytest.fixture
def service(repository, limiter) -> PostService:
    return PostService(repository, limiter)


class TestCreatePost:
    def test_persists_with_author_fingerprint(self, service: PostService) -> None:
        post = service.create_post(title="Hi", body="there", user="fp-1")

        assert post.user == "fp-1"
        assert service.get_post(post.id) == post

    @pytest.mark.parametrize(
        ("title", "body", "fields"),
        [
            ("", "body", ["title"]),
            ("title", "", ["body"]),
            ("", "", ["title", "body"]),
            ("   ", "\n\t", ["title", "body"]),
        ],
    )
    def test_rejects_empty_fields(
        self, service: PostService, title: str, body: str, fields: list[str]
    ) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            service.create_post(title=title, body=body, user="fp-1")

        assert exc_info.value.code == "empty_fields"
        assert exc_info.value.message == "Title and body cannot be empty"
        assert exc_info.value.details == {"fields": fields}

    def test_stores_trimmed_fields(self, service: PostService) -> None:
        post = service.create_post(title="  padded title ", body="\n body text\t", user="fp-1")

        assert (post.title, post.body) == ("padded title", "body text")
        assert service.get_post(post.id).title == "padded title"

    def test_invalid_input_does_not_consume_quota(self, service: PostService) -> None:
        for _ in range(5):
            with pytest.raises(ValidationAppError):
                service.create_post(title="", body="", user="fp-1")

        service.create_post(title="a", body="a", user="fp-1")
        service.create_post(title="b", body="b", user="fp-1")

    def test_rate_limit_exceeded(self, service: PostService) -> None:
        service.create_post(title="a", body="a", user="fp-1")
        service.create_post(title="b", body="b", user="fp-1")

        with pytest.raises(RateLimitAppError) as exc_info:
            service.create_post(title="c", body="c", user="fp-1")

        assert exc_info.value.code == "rate_limit_exceeded"
        assert exc_info.value.message == "Rate limit exceeded. Maximum 2 posts per hour."
        assert len(service.list_posts()) == 2

    def test_rate_limit_is_per_author(self, service: PostService) -> None:
        service.create_post(title="a", body="a", user="fp-1")
        service.create_post(title="b", body="b", user="fp-1")

        post = service.create_post(title="c", body="c", user="fp-2")

        assert post.user == "fp-2"

    def test_quota_returns_after_window(self, repository, clock) -> None:
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=3600, clock=clock)
        service = PostService(repository, limiter)
        service.create_post(title="a", body="a", user="fp-1")

        clock.return_value = 1000.0 + 3600
        service.create_post(title="b", body="b", user="fp-1")

        assert len(service.list_posts()) == 2

    def test_message_names_other_windows(self, repository, clock) -> None:
        limiter = InMemorySlidingWindowRateLimiter(limit=1, window_seconds=90, clock=clock)
        service = PostService(repository, limiter)
        service.create_post(title="a", body="a", user="fp-1")

        with pytest.raises(RateLimitAppError) as exc_info:
            service.create_post(title="b", body="b", user="fp-1")

        assert exc_info.value.message == "Rate limit exceeded. Maximum 1 posts per 90 seconds."

    def test_unlimited_without_limiter(self, repository) -> None:
        service = PostService(repository, None)

        for n in range(25):
            service.create_post(title=f"t{n}", body="b", user="fp-1")

        assert len(service.list_posts()) == 25

    def test_storage_error_propagates(self, limiter) -> None:
        repository = Mock(spec=AbstractPostRepository)
        repository.create.side_effect = StorageAppError(
            code="storage_error", message="Error saving post"
        )
        service = PostService(repository, limiter)

        with pytest.raises(StorageAppError):
            service.create_post(title="a", body="a", user="fp-1")


class TestUpdatePost:
    def test_stores_trimmed_fields(self, service: PostService) -> None:
        post = service.create_post(title="a", body="a", user="fp-1")

        updated = service.update_post(post.id, title=" new ", body=" text ")

        assert (updated.title, updated.body) == ("new", "text")

    def test_updates_content_and_keeps_author(self, service: PostService) -> None:
        post = service.create_post(title="old", body="old", user="fp-1")

        updated = service.update_post(post.id, title="new", body="new")

        assert (updated.id, updated.user) == (post.id, "fp-1")
        assert (updated.title, updated.body) == ("new", "new")

    def test_updates_are_not_rate_limited(self, service: PostService) -> None:
        post = service.create_post(title="a", body="a", user="fp-1")
        service.create_post(title="b", body="b", user="fp-1")

        for n in range(10):
            service.update_post(post.id, title=f"edit {n}", body="b")

        assert service.get_post(post.id).title == "edit 9"

    def test_rejects_empty_fields(self, service: PostService) -> None:
        post = service.create_post(title="a", body="a", user="fp-1")

        with pytest.raises(ValidationAppError):
            service.update_post(post.id, title="", body="b")

        assert service.get_post(post.id).title == "a"

    def test_missing_post(self, service: PostService) -> None:
        with pytest.raises(NotFoundAppError) as exc_info:
            service.update_post(999, title="t", body="b")

        assert exc_info.value.code == "post_not_found"


class TestGetAndDelete:
    def test_get_missing(self, service: PostService) -> None:
        with pytest.raises(NotFoundAppError) as exc_info:
            service.get_post(999)

        assert exc_info.value.details == {"post_id": 999}

    def test_delete(self, service: PostService) -> None:
        post = service.create_post(title="a", body="a", user="fp-1")

        assert service.delete_post(post.id) is True
        assert service.list_posts() == []

    def test_delete_missing_is_a_no_op(self, service: PostService) -> None:
        kept = service.create_post(title="a", body="a", user="fp-1")

        assert service.delete_post(999) is False
        assert service.list_posts() == [kept]

    def test_delete_does_not_refund_quota(self, service: PostService) -> None:
        first = service.create_post(title="a", body="a", user="fp-1")
        service.create_post(title="b", body="b", user="fp-1")
        service.delete_post(first.id)

        with pytest.raises(RateLimitAppError):
            service.create_post(title="c", body="c", user="fp-1")
