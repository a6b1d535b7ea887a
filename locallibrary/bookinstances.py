"""Book instance pages: list, detail, create, delete and update."""
from __future__ import annotations

import datetime as _dt
import logging

from flask import Blueprint, redirect, render_template, request
from sqlalchemy import select
from sqlalchemy.orm import joinedload

from .errors import NotFound, ValidationFailed
from .forms import INVALID_DATE, BookInstanceForm, parse_iso_date
from .models import DEFAULT_STATUS, STATUS_CHOICES, Book, BookInstance, get_session

logger = logging.getLogger(__name__)

bp = Blueprint("bookinstances", __name__, url_prefix="/catalog")

BOOKINSTANCE_LIST_URL = "/catalog/bookinstances"


def _book_choices(session):
    return session.execute(select(Book.id, Book.title).order_by(Book.title)).all()


def _parse_due_back(raw: str | None) -> _dt.date | None:
    """Coerce a raw ``due_back`` value to the column type; blank means no date."""
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationFailed(
            [{"field": "due_back", "message": INVALID_DATE}], message=f"Invalid due date {raw!r}"
        ) from None


@bp.route("/bookinstances")
def bookinstance_list():
    with get_session() as session:
        instances = session.scalars(
            select(BookInstance).options(joinedload(BookInstance.book)).order_by(BookInstance.id)
        ).all()
    return render_template("bookinstance_list.html", title="Book Instance List", bookinstance_list=instances)


@bp.route("/bookinstance/<int:instance_id>")
def bookinstance_detail(instance_id: int):
    with get_session() as session:
        instance = session.get(BookInstance, instance_id, options=[joinedload(BookInstance.book)])
    if instance is None:
        raise NotFound("Book copy not found")
    return render_template("bookinstance_detail.html", title="Book:", bookinstance=instance)


@bp.route("/bookinstance/create", methods=["GET", "POST"])
def bookinstance_create():
    form = BookInstanceForm()
    with get_session() as session:
        if request.method == "GET":
            return render_template(
                "bookinstance_form.html",
                title="Create BookInstance",
                form=form,
                book_list=_book_choices(session),
                status_choices=STATUS_CHOICES,
            )

        try:
            form.validate_or_raise()
        except ValidationFailed as exc:
            return render_template(
                "bookinstance_form.html",
                title="Create BookInstance",
                form=form,
                book_list=_book_choices(session),
                selected_book=form.book.data,
                status_choices=STATUS_CHOICES,
                errors=exc.fields,
            )

        instance = BookInstance(
            book_id=form.book.data,
            imprint=form.imprint.data,
            status=form.status.data or DEFAULT_STATUS,
            due_back=form.due_back.data,
        )
        session.add(instance)
        session.commit()
        logger.info("Created book instance %d of book %s", instance.id, instance.book_id)
        return redirect(instance.url)


@bp.route("/bookinstance/<int:instance_id>/delete", methods=["GET", "POST"])
def bookinstance_delete(instance_id: int):
    with get_session() as session:
        instance = session.get(BookInstance, instance_id, options=[joinedload(BookInstance.book)])
        if instance is None:
            return redirect(BOOKINSTANCE_LIST_URL)

        if request.method == "GET":
            return render_template("bookinstance_delete.html", title="Delete Book Instance", bookinstance=instance)

        # the row removed is the one named in the form body, not the route
        target_id = request.form.get("bookinstanceid", type=int)
        target = session.get(BookInstance, target_id) if target_id is not None else None
        if target is not None:
            session.delete(target)
            session.commit()
            logger.info("Deleted book instance %d", target_id)
    return redirect(BOOKINSTANCE_LIST_URL)


@bp.route("/bookinstance/<int:instance_id>/update", methods=["GET", "POST"])
def bookinstance_update(instance_id: int):
    with get_session() as session:
        instance = session.get(BookInstance, instance_id, options=[joinedload(BookInstance.book)])
        if instance is None:
            return redirect(BOOKINSTANCE_LIST_URL)

        if request.method == "GET":
            return render_template(
                "bookinstance_update.html",
                title="Update Book Instance",
                bookinstance=instance,
                status_choices=STATUS_CHOICES,
            )

        instance.status = request.form.get("status")
        instance.due_back = _parse_due_back(request.form.get("due_back"))
        session.commit()
        logger.info("Updated book instance %d", instance.id)
        return redirect(instance.url)
