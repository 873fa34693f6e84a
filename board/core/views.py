"""Server-side HTML rendering.

Full page (``index.html``) for the landing route and the ``posts_list.html``
fragment that mutating routes return so the page can swap the list in place.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from board.schemas.post import Post

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"
STATIC_DIR = Path(__file__).resolve().parents[1] / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render_index(
    request: Request,
    posts: Sequence[Post],
    current_user: str,
    *,
    error: str | None = None,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {"posts": list(posts), "current_user": current_user, "error": error},
    )


def render_posts_list(request: Request, posts: Sequence[Post], current_user: str) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "posts_list.html",
        {"posts": list(posts), "current_user": current_user},
    )
