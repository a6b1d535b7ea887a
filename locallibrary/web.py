"""Flask web interface for the library catalog."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from flask import Flask, redirect, render_template
from flask_wtf import CSRFProtect
from sqlalchemy import func, select

from . import bookinstances, genres
from .errors import register_error_handlers
from .models import Book, BookInstance, Genre, get_session, init_db

logger = logging.getLogger(__name__)

DEFAULT_DB_URL = "sqlite:///locallibrary.db"
DEFAULT_SECRET_KEY = "dev-secret-change-me"


def create_app(db_url: str = DEFAULT_DB_URL, config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.update(SECRET_KEY=DEFAULT_SECRET_KEY, WTF_CSRF_ENABLED=True)
    app.config.from_prefixed_env("LOCALLIBRARY")
    if config:
        app.config.update(config)
    if app.config["SECRET_KEY"] == DEFAULT_SECRET_KEY:
        logger.warning("Using the built-in development SECRET_KEY; set LOCALLIBRARY_SECRET_KEY")

    init_db(db_url)
    logger.debug("Catalog database at %s", db_url)

    CSRFProtect(app)
    register_error_handlers(app)
    app.register_blueprint(genres.bp)
    app.register_blueprint(bookinstances.bp)

    @app.route("/")
    def root():
        return redirect("/catalog/")

    @app.route("/catalog/")
    def index():
        with get_session() as session:
            counts = {
                "book_count": session.scalar(select(func.count(Book.id))),
                "book_instance_count": session.scalar(select(func.count(BookInstance.id))),
                "book_instance_available_count": session.scalar(
                    select(func.count(BookInstance.id)).where(BookInstance.status == "Available")
                ),
                "genre_count": session.scalar(select(func.count(Genre.id))),
            }
        return render_template("index.html", title="Local Library Home", **counts)

    return app
