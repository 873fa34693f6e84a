"""SQLAlchemy-backed post repository.

Works against PostgreSQL (``postgresql+psycopg://``) in production and SQLite
for local runs and tests. Every backend failure is logged and re-raised as
``StorageAppError`` with a generic, client-safe message.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Integer, Text, create_engine, delete, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from board.adapters.storage.base import AbstractPostRepository
from board.core.errors import StorageAppError
from board.schemas.post import Post

logger = logging.getLogger(__name__)

_ERROR_MESSAGES = {
    "init_schema": "Error creating tables",
    "ping": "Database unavailable",
    "create": "Error saving post",
    "get": "Error fetching post",
    "update": "Error updating post",
    "delete": "Error deleting post",
    "list_recent": "Error fetching posts",
}


class Base(DeclarativeBase):
    pass


class PostRecord(Base):
    """Row of the ``posts`` table."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    user: Mapped[str] = mapped_column(Text, nullable=False)


def create_db_engine(url: str, *, echo: bool = False) -> Engine:
    """Build an engine; SQLite connections are shared across worker threads."""

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=not url.startswith("sqlite"),
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )


class SqlAlchemyPostRepository(AbstractPostRepository):
    """Post repository over a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> "SqlAlchemyPostRepository":
        return cls(create_db_engine(url, echo=echo))

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """Transactional session that maps driver failures to StorageAppError."""
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(
                "storage.failed",
                extra={
                    "operation": operation,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise StorageAppError(
                code="storage_error",
                message=_ERROR_MESSAGES[operation],
                details={"operation": operation},
            ) from exc
        finally:
            session.close()

    def init_schema(self) -> None:
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            logger.error(
                "storage.failed",
                extra={"operation": "init_schema", "error_type": type(exc).__name__},
            )
            raise StorageAppError(
                code="storage_error",
                message=_ERROR_MESSAGES["init_schema"],
                details={"operation": "init_schema"},
            ) from exc

    def ping(self) -> None:
        with self._session("ping") as session:
            session.execute(text("SELECT 1"))

    def create(self, *, title: str, body: str, user: str) -> Post:
        with self._session("create") as session:
            record = PostRecord(title=title, body=body, user=user)
            session.add(record)
            session.flush()
            return Post.model_validate(record)

    def get(self, post_id: int) -> Post | None:
        with self._session("get") as session:
            record = session.get(PostRecord, post_id)
            return Post.model_validate(record) if record is not None else None

    def update(self, post_id: int, *, title: str, body: str) -> Post | None:
        with self._session("update") as session:
            record = session.get(PostRecord, post_id, with_for_update=True)
            if record is None:
                return None
            record.title = title
            record.body = body
            session.flush()
            return Post.model_validate(record)

    def delete(self, post_id: int) -> bool:
        with self._session("delete") as session:
            result = session.execute(delete(PostRecord).where(PostRecord.id == post_id))
            return result.rowcount > 0

    def list_recent(self) -> list[Post]:
        with self._session("list_recent") as session:
            records = session.scalars(select(PostRecord).order_by(PostRecord.id.desc()))
            return [Post.model_validate(record) for record in records]
