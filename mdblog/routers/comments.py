import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import RedirectResponse

from mdblog.deps import Blog, get_blog
from mdblog.errors import InvalidTitleError
from mdblog.storage import Comment, check_title

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comment", tags=["comments"])


@router.post("/{title}")
def post_comment(
    title: str,
    name: str = Form(""),
    comment: str = Form(""),
    blog: Blog = Depends(get_blog),
):
    try:
        check_title(title)
    except InvalidTitleError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    logger.debug("comment submitted for %s", title)
    blog.store.add_comment(title, Comment(name=name, comment=comment))
    return RedirectResponse(url=f"/page/{quote(title)}", status_code=302)
