"""
pytest configuration and fixtures.
"""

import os
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from mdblog.config import Settings
from mdblog.main import create_app
from mdblog.storage import CommentStore

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

# fixed mtime so repeated loads compare equal
MTIME = 1_700_000_000


def write_page(folder: Path, name: str, text: str) -> Path:
    path = folder / name
    path.write_text(text, encoding="utf-8")
    os.utime(path, (MTIME, MTIME))
    return path


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    path = tmp_path / "pages"
    path.mkdir()
    return path


@pytest.fixture
def comments_dir(tmp_path: Path) -> Path:
    return tmp_path / "comments"


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    path = tmp_path / "files"
    path.mkdir()
    return path


@pytest.fixture
def store(comments_dir: Path) -> CommentStore:
    return CommentStore(comments_dir)


@pytest.fixture
def settings(src_dir: Path, comments_dir: Path, files_dir: Path) -> Settings:
    return Settings(
        src=src_dir,
        tmpl=TEMPLATES_DIR,
        files=files_dir,
        comments=comments_dir,
        refresh=30,
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Client with the lifespan running, so the index cache is populated."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client
