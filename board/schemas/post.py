"""Pydantic schemas for posts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Post(BaseModel):
    """A persisted bulletin-board post."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int = Field(..., description="Generated, monotonically increasing identifier.")
    title: str = Field(..., description="Post title (non-empty).")
    body: str = Field(..., description="Post body (non-empty).")
    user: str = Field(
        ..., description="Fingerprint of the identity that created the post."
    )
