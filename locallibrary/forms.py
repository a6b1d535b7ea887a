"""WTForms definitions for the catalog create forms.

Fields listed in ``escaped_fields`` are HTML-escaped after validation has run,
so length checks see the trimmed user input and the re-rendered form (or the
stored row) sees the escaped value.
"""
from __future__ import annotations

import datetime as _dt
import re
from typing import Dict, List

from flask_wtf import FlaskForm
from markupsafe import escape
from wtforms import DateField, StringField
from wtforms.validators import DataRequired, Length, Optional

from .errors import ValidationFailed

__all__ = ["CatalogForm", "GenreForm", "BookInstanceForm", "IsoDateField", "parse_iso_date"]

ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
INVALID_DATE = "Invalid date"


def parse_iso_date(raw: str) -> _dt.date:
    """Parse a strict ``YYYY-MM-DD`` calendar date, raising ``ValueError`` otherwise."""
    if not ISO_DATE.fullmatch(raw):
        raise ValueError(f"not a YYYY-MM-DD date: {raw!r}")
    return _dt.date.fromisoformat(raw)


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class IsoDateField(DateField):
    """``DateField`` that only takes zero-padded ``YYYY-MM-DD`` input."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        try:
            self.data = parse_iso_date(valuelist[0])
        except ValueError:
            self.data = None
            raise ValueError(self.gettext(INVALID_DATE)) from None


class CatalogForm(FlaskForm):
    escaped_fields: tuple[str, ...] = ()

    def validate(self, extra_validators=None) -> bool:
        ok = super().validate(extra_validators=extra_validators)
        for name in self.escaped_fields:
            field = self[name]
            if field.data is not None:
                field.data = str(escape(field.data))
        return ok

    def error_list(self) -> List[Dict[str, str]]:
        """Flatten ``form.errors`` into ``[{"field": ..., "message": ...}]``."""
        return [
            {"field": name, "message": message}
            for name, messages in self.errors.items()
            for message in messages
        ]

    def validate_or_raise(self) -> None:
        if not self.validate():
            raise ValidationFailed(self.error_list())


class GenreForm(CatalogForm):
    escaped_fields = ("name",)

    name = StringField(
        "Genre",
        filters=[_strip],
        validators=[Length(min=3, message="Genre name must contain at least 3 characters")],
    )


class BookInstanceForm(CatalogForm):
    escaped_fields = ("book", "imprint", "status")

    book = StringField("Book", filters=[_strip], validators=[DataRequired(message="Book must be specified")])
    imprint = StringField(
        "Imprint", filters=[_strip], validators=[DataRequired(message="Imprint must be specified")]
    )
    status = StringField("Status")
    # blank means "no due date"; anything else must be a YYYY-MM-DD calendar date
    due_back = IsoDateField("Date when book available", validators=[Optional()])
