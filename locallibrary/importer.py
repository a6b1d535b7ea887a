"""Database population helpers."""

from __future__ import annotations

import datetime as _dt
import json
import logging
from pathlib import Path
from typing import Iterable

from .models import DEFAULT_STATUS, Book, BookInstance, Genre, get_session, init_db

logger = logging.getLogger(__name__)

__all__ = ["import_books"]


def import_books(
    source: Path,
    db_url: str = "sqlite:///locallibrary.db",
    chunk_size: int = 500,
) -> int:
    """Load the JSON array of book records in *source* into DB specified by *db_url*.

    Each record looks like::

        {"title": "...", "summary": "...", "genres": ["Fantasy"],
         "instances": [{"imprint": "...", "status": "Available", "due_back": "2024-01-15"}]}

    Genres are matched by exact name and created when missing. Books already
    present with the same title are skipped. Returns the number of imported books.
    """
    records = json.loads(Path(source).read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{source}: expected a JSON array of book records")

    init_db(db_url)
    session = get_session()
    genre_cache: dict[str, Genre] = {}

    count = 0
    buffer: list[dict] = []
    try:
        for row in records:
            buffer.append(row)
            if len(buffer) >= chunk_size:
                count += _flush(buffer, session, genre_cache)
                session.commit()
                buffer.clear()
        if buffer:
            count += _flush(buffer, session, genre_cache)
        session.commit()
    finally:
        session.close()
    logger.info("Imported %d books from %s", count, source)
    return count


def _flush(buffer: list[dict], session, genre_cache: dict[str, Genre]) -> int:
    inserted = 0
    for row in buffer:
        title = (row.get("title") or "").strip()
        # skip records lacking a title
        if not title:
            continue
        if session.query(Book).filter_by(title=title).first() is not None:
            continue

        book = Book(title=title, summary=row.get("summary"))
        book.genres = _ensure_genres(session, row.get("genres") or [], genre_cache)
        for inst in row.get("instances") or []:
            due_back = None
            if inst.get("due_back"):
                try:
                    due_back = _dt.date.fromisoformat(inst["due_back"])
                except ValueError:
                    logger.warning("Ignoring bad due_back %r for %r", inst["due_back"], title)
            book.instances.append(
                BookInstance(
                    imprint=inst.get("imprint") or "",
                    status=inst.get("status") or DEFAULT_STATUS,
                    due_back=due_back,
                )
            )
        session.add(book)
        inserted += 1
    session.flush()
    return inserted


def _ensure_genres(session, names: Iterable[str], cache: dict[str, Genre]) -> list[Genre]:
    objs: list[Genre] = []
    for name in names:
        name = name.strip()
        if not name:
            continue
        obj = cache.get(name)
        if obj is None:
            obj = session.query(Genre).filter_by(name=name).first()
            if obj is None:
                obj = Genre(name=name)
                session.add(obj)
                session.flush([obj])
            cache[name] = obj
        if obj not in objs:
            objs.append(obj)
    return objs
