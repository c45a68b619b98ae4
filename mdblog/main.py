import logging
from contextlib import asynccontextmanager
from functools import partial

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from mdblog.cache import IndexCache
from mdblog.config import Settings, settings_from_args
from mdblog.deps import Blog
from mdblog.errors import BlogError
from mdblog.pages import load_pages
from mdblog.routers import comments, pages
from mdblog.storage import CommentStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    blog: Blog = app.state.blog
    blog.settings.comments.mkdir(parents=True, exist_ok=True)
    await run_in_threadpool(blog.cache.start)
    logger.info(
        "serving %s (templates %s, files %s, comments %s)",
        blog.settings.src,
        blog.settings.tmpl,
        blog.settings.files,
        blog.settings.comments,
    )
    try:
        yield
    finally:
        await run_in_threadpool(blog.cache.stop)


async def blog_error_handler(request: Request, exc: BlogError):
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    store = CommentStore(settings.comments)
    cache = IndexCache(partial(load_pages, settings.src, store), settings.refresh)
    templates = Jinja2Templates(directory=str(settings.tmpl))

    app = FastAPI(title="mdblog", lifespan=lifespan)
    app.state.blog = Blog(settings=settings, store=store, cache=cache, templates=templates)

    # ルーター登録
    app.include_router(pages.router)
    app.include_router(comments.router)
    app.add_exception_handler(BlogError, blog_error_handler)

    # 静的ファイルの配信 (/files でアクセス可能にする)
    app.mount(
        "/files",
        StaticFiles(directory=str(settings.files), check_dir=False),
        name="files",
    )
    return app


app = create_app()


def run(argv=None) -> None:
    settings = settings_from_args(argv)
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
