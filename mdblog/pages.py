import os
import stat
from datetime import datetime
from pathlib import Path

import markdown
from pydantic import BaseModel, ConfigDict, Field

from mdblog.errors import BlogError, NotFoundError, StorageIOError
from mdblog.storage import Comment, CommentStore

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


class Page(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(alias="Title")
    last_change: datetime = Field(alias="LastChange")
    content: str = Field(alias="Content")
    comments: list[Comment] = Field(default_factory=list, alias="Comments")


def render_markdown(source: bytes) -> str:
    text = source.decode("utf-8", errors="replace")
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def resolve_page_path(src, name: str) -> Path:
    """Map a page name from a URL to a file directly inside ``src``."""
    seps = [s for s in (os.sep, os.altsep, "\x00") if s]
    if name in ("", ".", "..") or any(s in name for s in seps):
        raise NotFoundError(f"no page named {name!r}")
    return Path(src) / name


def load_page(path, store: CommentStore) -> Page:
    path = Path(path)
    try:
        st = path.stat()
    except FileNotFoundError as exc:
        raise NotFoundError(f"load_page: {path}: no such file") from exc
    except OSError as exc:
        raise StorageIOError(f"load_page: {path}: {exc}") from exc
    if stat.S_ISDIR(st.st_mode):
        raise NotFoundError(f"load_page: {path}: is a directory")

    title = path.name
    try:
        comments = store.load_comments(title)
    except BlogError as exc:
        raise type(exc)(f"load_page.load_comments: {exc}") from exc

    try:
        source = path.read_bytes()
    except FileNotFoundError as exc:
        raise NotFoundError(f"load_page.read: {path}: no such file") from exc
    except OSError as exc:
        raise StorageIOError(f"load_page.read: {path}: {exc}") from exc

    return Page(
        title=title,
        last_change=datetime.fromtimestamp(st.st_mtime).astimezone(),
        content=render_markdown(source),
        comments=comments,
    )


def load_pages(src, store: CommentStore) -> list[Page]:
    """Load every file in ``src``; the first failing page aborts the scan."""
    src = Path(src)
    try:
        with os.scandir(src) as it:
            entries = sorted(it, key=lambda e: e.name)
    except FileNotFoundError as exc:
        raise NotFoundError(f"load_pages: {src}: no such directory") from exc
    except OSError as exc:
        raise StorageIOError(f"load_pages: {src}: {exc}") from exc

    pages = []
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError as exc:
            raise StorageIOError(f"load_pages: {entry.path}: {exc}") from exc
        if is_dir:
            continue
        try:
            pages.append(load_page(entry.path, store))
        except BlogError as exc:
            raise type(exc)(f"load_pages.load_page: {exc}") from exc
    return pages
