"""SQLAlchemy ORM models for the library catalog."""

from __future__ import annotations

import datetime as _dt
from typing import List

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Table, Text, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, sessionmaker

STATUS_CHOICES = ("Available", "Maintenance", "Loaned", "Reserved")
DEFAULT_STATUS = "Maintenance"


class Base(DeclarativeBase):
    pass


book_genres = Table(
    "book_genres",
    Base.metadata,
    Column("book_id", ForeignKey("books.id"), primary_key=True),
    Column("genre_id", ForeignKey("genres.id"), primary_key=True),
)


class Genre(Base):
    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # uniqueness is checked by the create handler, not by the schema
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    books: Mapped[List["Book"]] = relationship(back_populates="genres", secondary=book_genres)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Genre {self.name}>"


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text)

    genres: Mapped[List[Genre]] = relationship(back_populates="books", secondary=book_genres)
    instances: Mapped[List["BookInstance"]] = relationship(back_populates="book")

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"


class BookInstance(Base):
    __tablename__ = "bookinstances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), nullable=False)
    imprint: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str | None] = mapped_column(String(20), default=DEFAULT_STATUS)
    due_back: Mapped[_dt.date | None] = mapped_column(Date, nullable=True)

    book: Mapped[Book] = relationship(back_populates="instances")

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        if self.due_back is None:
            return ""
        return f"{self.due_back:%b} {self.due_back.day}, {self.due_back.year}"

    @property
    def due_back_yyyy_mm_dd(self) -> str:
        return self.due_back.isoformat() if self.due_back else ""


# database helpers

_engine = None
_Session = None


def init_db(url: str = "sqlite:///locallibrary.db") -> None:
    """Create engine, create tables if not exist, globally store session factory."""
    global _engine, _Session

    _engine = create_engine(url, future=True)

    if _engine.dialect.name == "sqlite":
        # SQLite leaves foreign keys unchecked unless asked per connection
        @event.listens_for(_engine, "connect")
        def enable_foreign_keys(dbapi_conn, _):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    Base.metadata.create_all(_engine)
    _Session = sessionmaker(_engine, expire_on_commit=False, future=True)


def get_session():
    if _Session is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _Session()
