"""Post repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from board.schemas.post import Post


class AbstractPostRepository(ABC):
    """CRUD and listing over posts.

    Implementations raise ``StorageAppError`` when the backend fails and use
    ``None``/``False`` return values to report a missing row.
    """

    @abstractmethod
    def init_schema(self) -> None:
        """Create the backing tables if they do not exist."""
        raise NotImplementedError

    @abstractmethod
    def ping(self) -> None:
        """Round-trip to the backend; raises StorageAppError when unreachable."""
        raise NotImplementedError

    @abstractmethod
    def create(self, *, title: str, body: str, user: str) -> Post:
        """Persist a new post and return it with its generated id."""
        raise NotImplementedError

    @abstractmethod
    def get(self, post_id: int) -> Post | None:
        """Fetch one post, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def update(self, post_id: int, *, title: str, body: str) -> Post | None:
        """Replace title and body of one post; None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, post_id: int) -> bool:
        """Remove one post; False if it did not exist."""
        raise NotImplementedError

    @abstractmethod
    def list_recent(self) -> list[Post]:
        """Return every post, newest first."""
        raise NotImplementedError
