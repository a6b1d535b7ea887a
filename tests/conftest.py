"""Pytest configuration for locallibrary tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure project root is importable
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from locallibrary.models import Book, BookInstance, Genre, get_session  # noqa: E402
from locallibrary.web import create_app  # noqa: E402


@pytest.fixture
def app(tmp_path: Path):
    app = create_app(
        f"sqlite:///{tmp_path / 'test.db'}",
        config={"TESTING": True, "WTF_CSRF_ENABLED": False, "SECRET_KEY": "test"},
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def catalog(app):
    """A genre with one book and one copy, plus an empty genre."""
    sess = get_session()
    fantasy = Genre(name="Fantasy")
    poetry = Genre(name="Poetry")
    book = Book(title="The Name of the Wind", summary="A boy becomes a legend.")
    book.genres.append(fantasy)
    copy = BookInstance(book=book, imprint="Gollancz, 2007", status="Loaned")
    sess.add_all([fantasy, poetry, book, copy])
    sess.commit()
    ids = {"fantasy": fantasy.id, "poetry": poetry.id, "book": book.id, "copy": copy.id}
    sess.close()
    return ids
