"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that builds settings, so the
module-level ``settings`` object and ``board.main.app`` point at a throwaway
SQLite database instead of a developer's .env configuration.
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import Mock

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault(
    "DB_URL", f"sqlite:///{Path(tempfile.mkdtemp(prefix='board-tests-')) / 'board.db'}"
)
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from board.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from board.adapters.storage.sqlalchemy_repository import SqlAlchemyPostRepository
from board.core.config import settings as global_settings


@pytest.fixture
def clock() -> Mock:
    """Controllable time source starting at t=1000s."""
    return Mock(return_value=1000.0)


@pytest.fixture
def repository(tmp_path: Path) -> SqlAlchemyPostRepository:
    """Post repository over a fresh SQLite file with the schema created."""
    repo = SqlAlchemyPostRepository.from_url(f"sqlite:///{tmp_path / 'posts.db'}")
    repo.init_schema()
    yield repo
    repo.engine.dispose()


@pytest.fixture
def limiter(clock: Mock) -> InMemorySlidingWindowRateLimiter:
    """Two posts per hour, frozen clock."""
    return InMemorySlidingWindowRateLimiter(limit=2, window_seconds=3600, clock=clock)


@pytest.fixture
def settings():
    """Global settings; tests copy and override what they need."""
    return global_settings
