import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from pydantic import BaseModel, TypeAdapter, ValidationError

from mdblog.errors import DecodeError, EncodeError, InvalidTitleError, StorageIOError

logger = logging.getLogger(__name__)


class Comment(BaseModel):
    name: str
    comment: str


_comment_list = TypeAdapter(list[Comment])


def check_title(title: str) -> str:
    seps = [s for s in (os.sep, os.altsep, "\x00") if s]
    if title in ("", ".", "..") or any(s in title for s in seps):
        raise InvalidTitleError(f"invalid title {title!r}")
    return title


class CommentStore:
    """Per-page comment logs, one JSON array file per page title.

    Every read-modify-write cycle goes through ``add_comment`` and is
    serialized by one lock shared by all titles.
    """

    def __init__(self, directory):
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def _file(self, title: str) -> Path:
        return self.directory / f"{check_title(title)}.json"

    def load_comments(self, title: str) -> list[Comment]:
        f = self._file(title)
        try:
            raw = f.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageIOError(f"load_comments: {f}: {exc}") from exc
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise DecodeError(f"load_comments: {f}: {exc}") from exc
        if data is None:
            return []
        try:
            return _comment_list.validate_python(data)
        except ValidationError as exc:
            raise DecodeError(f"load_comments: {f}: unexpected shape") from exc

    def save_comments(self, title: str, comments: list[Comment]) -> None:
        f = self._file(title)
        try:
            payload = json.dumps(
                [c.model_dump() for c in comments],
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"save_comments: {title}: {exc}") from exc

        # full replace: readers see either the old file or the new one
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{title}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as out:
                    out.write(payload + "\n")
                os.replace(tmp, f)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageIOError(f"save_comments: {f}: {exc}") from exc

    def add_comment(self, title: str, comment: Comment) -> list[Comment]:
        with self._lock:
            items = self.load_comments(title)
            items.append(comment)
            self.save_comments(title, items)
        logger.info("comment added to %s by %r (%d total)", title, comment.name, len(items))
        return items
