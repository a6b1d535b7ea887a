"""Error variants raised by the catalog handlers and the Flask boundary that renders them."""
from __future__ import annotations

import logging
from typing import Dict, List

from flask import Flask, render_template
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

__all__ = [
    "CatalogError",
    "NotFound",
    "ValidationFailed",
    "InfrastructureFailure",
    "register_error_handlers",
]


class CatalogError(Exception):
    """Base class; ``status`` is the HTTP status the boundary answers with."""

    status = 500

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class NotFound(CatalogError):
    status = 404


class ValidationFailed(CatalogError):
    status = 400

    def __init__(self, fields: List[Dict[str, str]], message: str = "Invalid form data") -> None:
        super().__init__(message)
        self.fields = fields


class InfrastructureFailure(CatalogError):
    status = 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(CatalogError)
    def handle_catalog_error(err: CatalogError):
        if err.status >= 500:
            logger.error("%s: %s", type(err).__name__, err.message, exc_info=err.__cause__ or err)
        else:
            logger.info("%s (%d): %s", type(err).__name__, err.status, err.message)
        fields = getattr(err, "fields", [])
        return render_template("error.html", message=err.message, status=err.status, errors=fields), err.status

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(err: SQLAlchemyError):
        failure = InfrastructureFailure(f"Database error: {err.__class__.__name__}")
        failure.__cause__ = err
        return handle_catalog_error(failure)
