"""Bulletin-board routes.

Mutating routes answer with the re-rendered ``posts_list.html`` fragment;
``GET /post/{post_id}`` answers with JSON.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from board.api.dependencies import get_post_service
from board.core.errors import StorageAppError
from board.core.identity import get_current_user
from board.core.views import render_index, render_posts_list
from board.schemas.post import Post
from board.services.post_service import PostService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])

ServiceDep = Annotated[PostService, Depends(get_post_service)]
CurrentUser = Annotated[str, Depends(get_current_user)]
TitleField = Annotated[str, Form()]
BodyField = Annotated[str, Form()]

LIST_UNAVAILABLE_MESSAGE = "Unable to load posts. Please try again later."


@router.get("/", response_class=HTMLResponse)
def index(request: Request, service: ServiceDep, current_user: CurrentUser) -> HTMLResponse:
    """Render the full page with every post, newest first.

    A store failure still yields the page, with an error banner and no posts.
    """
    try:
        posts = service.list_posts()
    except StorageAppError as exc:
        logger.warning("posts.list_unavailable", extra={"error_code": exc.code})
        return render_index(request, [], current_user, error=LIST_UNAVAILABLE_MESSAGE)
    return render_index(request, posts, current_user)


@router.post("/new_post", response_class=HTMLResponse)
def create_post(
    request: Request,
    service: ServiceDep,
    current_user: CurrentUser,
    title: TitleField = "",
    body: BodyField = "",
) -> HTMLResponse:
    service.create_post(title=title, body=body, user=current_user)
    return render_posts_list(request, service.list_posts(), current_user)


@router.get("/post/{post_id}", response_model=Post)
def get_post(post_id: int, service: ServiceDep) -> Post:
    return service.get_post(post_id)


@router.put("/post/{post_id}", response_class=HTMLResponse)
def update_post(
    request: Request,
    post_id: int,
    service: ServiceDep,
    current_user: CurrentUser,
    title: TitleField = "",
    body: BodyField = "",
) -> HTMLResponse:
    service.update_post(post_id, title=title, body=body)
    return render_posts_list(request, service.list_posts(), current_user)


@router.delete("/post/{post_id}", response_class=HTMLResponse)
def delete_post(
    request: Request,
    post_id: int,
    service: ServiceDep,
    current_user: CurrentUser,
) -> HTMLResponse:
    service.delete_post(post_id)
    return render_posts_list(request, service.list_posts(), current_user)
