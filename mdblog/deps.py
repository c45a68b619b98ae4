from dataclasses import dataclass

from fastapi import Request
from fastapi.templating import Jinja2Templates

from mdblog.cache import IndexCache
from mdblog.config import Settings
from mdblog.storage import CommentStore


@dataclass
class Blog:
    """Process-wide state shared by all handlers.

    Built once by ``create_app``; the cache snapshot is filled before the
    first request is served and replaced whole on every refresh.
    """

    settings: Settings
    store: CommentStore
    cache: IndexCache
    templates: Jinja2Templates


def get_blog(request: Request) -> Blog:
    return request.app.state.blog
