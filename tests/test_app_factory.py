"""Tests for application assembly and collaborator injection."""

from __future__ import annotations

from unittest.mock import Mock

from fastapi.testclient import TestClient

from board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from board.adapters.storage.base import AbstractPostRepository
from board.core.app_factory import create_app
from board.core.rate_limit import build_rate_limiter


def test_builds_limiter_from_settings(settings, repository):
    app = create_app(settings, repository=repository, configure_logs=False)

    limiter = app.state.rate_limiter
    assert isinstance(limiter, InMemorySlidingWindowRateLimiter)
    assert limiter.limit == settings.app.rate_limit_posts
    assert limiter.window_seconds == settings.app.rate_limit_window_seconds


def test_disabled_rate_limiting_builds_no_limiter(settings):
    app_settings = settings.app.model_copy(update={"rate_limit_enabled": False})

    assert build_rate_limiter(app_settings) is None


def test_startup_checks_store_and_creates_schema(settings):
    repository = Mock(spec=AbstractPostRepository)
    app = create_app(settings, repository=repository, rate_limiter=None, configure_logs=False)

    with TestClient(app):
        pass

    repository.ping.assert_called_once_with()
    repository.init_schema.assert_called_once_with()


def test_custom_identity_deriver_is_used(settings, repository):
    identity = Mock()
    identity.derive.return_value = "fixed-identity"
    app = create_app(
        settings,
        repository=repository,
        rate_limiter=None,
        identity=identity,
        configure_logs=False,
    )

    with TestClient(app) as client:
        client.post("/new_post", data={"title": "t", "body": "b"})
        post = client.get("/post/1").json()

    assert post["user"] == "fixed-identity"
    identity.derive.assert_called_with("testclient")


def test_serves_static_assets(settings, repository):
    app = create_app(settings, repository=repository, configure_logs=False)

    with TestClient(app) as client:
        resp = client.get("/static/board.css")

    assert resp.status_code == 200
