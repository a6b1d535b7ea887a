"""locallibrary package - server-rendered catalog of genres and book copies.

This package provides:
    • SQLAlchemy ORM models (locallibrary.models) for persistence.
    • Flask blueprints for genre and book instance pages.
    • CLI utilities under locallibrary.cli (Click).
    • ``create_app`` - the Flask application factory.

Handlers open their own database session per request, which keeps them easy to
drive from the Flask test client.
"""

__all__ = [
    "create_app",
]

from .web import create_app  # noqa: E402
