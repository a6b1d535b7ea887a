"""Genre pages: list, detail, create, delete and update."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from flask import Blueprint, redirect, render_template, request
from sqlalchemy import select

from .errors import NotFound, ValidationFailed
from .forms import GenreForm
from .models import Book, Genre, get_session

logger = logging.getLogger(__name__)

bp = Blueprint("genres", __name__, url_prefix="/catalog")

GENRE_LIST_URL = "/catalog/genres"


def _load_genre(genre_id: int) -> Genre | None:
    with get_session() as session:
        return session.get(Genre, genre_id)


def _load_genre_books(genre_id: int) -> List:
    """Books filed under *genre_id*, projected to id, title and summary."""
    with get_session() as session:
        stmt = (
            select(Book.id, Book.title, Book.summary)
            .where(Book.genres.any(Genre.id == genre_id))
            .order_by(Book.title)
        )
        return session.execute(stmt).all()


@bp.route("/genres")
def genre_list():
    with get_session() as session:
        genres = session.scalars(select(Genre).order_by(Genre.name)).all()
    return render_template("genre_list.html", title="Genre List", genre_list=genres)


@bp.route("/genre/<int:genre_id>")
def genre_detail(genre_id: int):
    # both reads go out before either is waited on
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="genre-detail") as pool:
        genre_future = pool.submit(_load_genre, genre_id)
        books_future = pool.submit(_load_genre_books, genre_id)
        genre = genre_future.result()
        genre_books = books_future.result()

    if genre is None:
        raise NotFound("Genre not found")

    return render_template("genre_detail.html", title="Genre Detail", genre=genre, genre_books=genre_books)


@bp.route("/genre/create", methods=["GET", "POST"])
def genre_create():
    form = GenreForm()
    if request.method == "GET":
        return render_template("genre_form.html", title="Create Genre", form=form)

    try:
        form.validate_or_raise()
    except ValidationFailed as exc:
        return render_template("genre_form.html", title="Create Genre", form=form, errors=exc.fields)

    with get_session() as session:
        existing = session.scalars(select(Genre).where(Genre.name == form.name.data).limit(1)).first()
        if existing is not None:
            return redirect(existing.url)

        genre = Genre(name=form.name.data)
        session.add(genre)
        session.commit()
        logger.info("Created genre %d (%s)", genre.id, genre.name)
        return redirect(genre.url)


@bp.route("/genre/<int:genre_id>/delete", methods=["GET", "POST"])
def genre_delete(genre_id: int):
    with get_session() as session:
        genre = session.get(Genre, genre_id)
        if genre is None:
            return redirect(GENRE_LIST_URL)

        genre_books = _load_genre_books(genre_id)
        if request.method == "GET" or genre_books:
            if request.method == "POST":
                logger.info("Refusing to delete genre %d: %d book(s) attached", genre_id, len(genre_books))
            return render_template(
                "genre_delete.html", title="Delete Genre", genre=genre, genre_books=genre_books
            )

        # the row removed is the one named in the form body, not the route
        target_id = request.form.get("genreid", type=int)
        target = session.get(Genre, target_id) if target_id is not None else None
        if target is not None:
            session.delete(target)
            session.commit()
            logger.info("Deleted genre %d", target_id)
    return redirect(GENRE_LIST_URL)


@bp.route("/genre/<int:genre_id>/update", methods=["GET", "POST"])
def genre_update(genre_id: int):
    with get_session() as session:
        genre = session.get(Genre, genre_id)
        if genre is None:
            return redirect(GENRE_LIST_URL)

        if request.method == "GET":
            return render_template("genre_update.html", title="Update Genre", genre=genre)

        genre.name = request.form.get("name")
        genre.description = request.form.get("description")
        session.commit()
        logger.info("Updated genre %d", genre.id)
        return redirect(genre.url)
