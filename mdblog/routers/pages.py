import json

import jinja2
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from mdblog.deps import Blog, get_blog
from mdblog.errors import EncodeError, TemplateError
from mdblog.pages import load_page, load_pages, resolve_page_path

router = APIRouter(tags=["pages"])


def render(blog: Blog, request: Request, name: str, **context) -> HTMLResponse:
    try:
        return blog.templates.TemplateResponse(request, name, context)
    except jinja2.TemplateError as exc:
        raise TemplateError(f"render {name}: {exc}") from exc


# --- index: served from the cached snapshot, never loads ---
@router.get("/", response_class=HTMLResponse)
def index(request: Request, blog: Blog = Depends(get_blog)):
    return render(blog, request, "index.html", pages=blog.cache.snapshot)


@router.get("/page/{name}", response_class=HTMLResponse)
def show_page(name: str, request: Request, blog: Blog = Depends(get_blog)):
    page = load_page(resolve_page_path(blog.settings.src, name), blog.store)
    return render(blog, request, "page.html", page=page)


@router.get("/api/")
def api_pages(blog: Blog = Depends(get_blog)):
    pages = load_pages(blog.settings.src, blog.store)
    try:
        body = json.dumps(
            [p.model_dump(mode="json", by_alias=True) for p in pages],
            indent=2,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"api: {exc}") from exc
    return Response(body + "\n", media_type="application/json")
