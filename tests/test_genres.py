"""Tests for the genre pages."""
from sqlalchemy import func, select

from locallibrary.models import Book, Genre, get_session


def _genre_count(name: str | None = None) -> int:
    with get_session() as sess:
        stmt = select(func.count(Genre.id))
        if name is not None:
            stmt = stmt.where(Genre.name == name)
        return sess.scalar(stmt)


def test_genre_list_sorted_by_name(client, catalog):
    resp = client.get("/catalog/genres")
    assert resp.status_code == 200
    assert resp.data.index(b"Fantasy") < resp.data.index(b"Poetry")


def test_genre_detail_shows_books(client, catalog):
    resp = client.get(f"/catalog/genre/{catalog['fantasy']}")
    assert resp.status_code == 200
    assert b"Genre: Fantasy" in resp.data
    assert b"The Name of the Wind" in resp.data
    assert b"A boy becomes a legend." in resp.data


def test_genre_detail_without_books(client, catalog):
    resp = client.get(f"/catalog/genre/{catalog['poetry']}")
    assert resp.status_code == 200
    assert b"This genre has no books" in resp.data


def test_genre_detail_missing_is_404(client, catalog):
    resp = client.get("/catalog/genre/9999")
    assert resp.status_code == 404
    assert b"Genre not found" in resp.data


def test_genre_create_form(client):
    resp = client.get("/catalog/genre/create")
    assert resp.status_code == 200
    assert b'name="name"' in resp.data


def test_genre_create_inserts_and_redirects(client, catalog):
    resp = client.post("/catalog/genre/create", data={"name": "Science Fiction"})
    assert resp.status_code == 302
    with get_session() as sess:
        genre = sess.scalars(select(Genre).where(Genre.name == "Science Fiction")).one()
    assert resp.headers["Location"].endswith(f"/catalog/genre/{genre.id}")
    assert _genre_count() == 3


def test_genre_create_duplicate_redirects_to_existing(client, catalog):
    resp = client.post("/catalog/genre/create", data={"name": "Fantasy"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith(f"/catalog/genre/{catalog['fantasy']}")
    assert _genre_count("Fantasy") == 1
    assert _genre_count() == 2


def test_genre_create_duplicate_check_is_case_sensitive(client, catalog):
    resp = client.post("/catalog/genre/create", data={"name": "fantasy"})
    assert resp.status_code == 302
    assert _genre_count() == 3


def test_genre_create_short_name_rerenders(client, catalog):
    resp = client.post("/catalog/genre/create", data={"name": " ab "})
    assert resp.status_code == 200
    assert resp.data.count(b'data-field="name"') == 1
    assert b"Genre name must contain at least 3 characters" in resp.data
    # trimmed value is kept in the form
    assert b'value="ab"' in resp.data
    assert _genre_count() == 2


def test_genre_create_missing_name_rerenders(client):
    resp = client.post("/catalog/genre/create", data={})
    assert resp.status_code == 200
    assert resp.data.count(b'data-field="name"') == 1
    assert _genre_count() == 0


def test_genre_create_trims_and_escapes(client):
    resp = client.post("/catalog/genre/create", data={"name": "  Sci & Fi  "})
    assert resp.status_code == 302
    with get_session() as sess:
        names = sess.scalars(select(Genre.name)).all()
    assert names == ["Sci &amp; Fi"]


def test_genre_delete_get(client, catalog):
    resp = client.get(f"/catalog/genre/{catalog['poetry']}/delete")
    assert resp.status_code == 200
    assert b"Do you really want to delete this Genre?" in resp.data
    assert f'name="genreid" value="{catalog["poetry"]}"'.encode() in resp.data


def test_genre_delete_get_lists_blocking_books(client, catalog):
    resp = client.get(f"/catalog/genre/{catalog['fantasy']}/delete")
    assert resp.status_code == 200
    assert b"Delete the following books" in resp.data
    assert b"The Name of the Wind" in resp.data


def test_genre_delete_missing_redirects_to_list(client, catalog):
    for method in (client.get, client.post):
        resp = method("/catalog/genre/9999/delete", data={"genreid": "9999"})
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/catalog/genres")


def test_genre_delete_blocked_by_books(client, catalog):
    fantasy = catalog["fantasy"]
    for _ in range(2):
        resp = client.post(f"/catalog/genre/{fantasy}/delete", data={"genreid": str(fantasy)})
        assert resp.status_code == 200
        assert b"Delete the following books" in resp.data
        assert _genre_count("Fantasy") == 1


def test_genre_delete_without_books(client, catalog):
    poetry = catalog["poetry"]
    resp = client.post(f"/catalog/genre/{poetry}/delete", data={"genreid": str(poetry)})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/catalog/genres")
    assert _genre_count("Poetry") == 0
    assert client.get(f"/catalog/genre/{poetry}").status_code == 404


def test_genre_delete_uses_body_id(client, catalog):
    with get_session() as sess:
        drama = Genre(name="Drama")
        sess.add(drama)
        sess.commit()
        drama_id = drama.id

    resp = client.post(f"/catalog/genre/{catalog['poetry']}/delete", data={"genreid": str(drama_id)})
    assert resp.status_code == 302
    assert _genre_count("Drama") == 0
    assert _genre_count("Poetry") == 1


def test_genre_delete_checks_books_of_route_genre(client, catalog):
    # the route genre is empty, so the body genre goes even though it has books
    resp = client.post(
        f"/catalog/genre/{catalog['poetry']}/delete", data={"genreid": str(catalog["fantasy"])}
    )
    assert resp.status_code == 302
    assert _genre_count("Fantasy") == 0
    with get_session() as sess:
        book = sess.get(Book, catalog["book"])
        assert book.genres == []


def test_genre_update_get_prefills(client, catalog):
    resp = client.get(f"/catalog/genre/{catalog['poetry']}/update")
    assert resp.status_code == 200
    assert b'value="Poetry"' in resp.data


def test_genre_update_missing_redirects(client, catalog):
    for method in (client.get, client.post):
        resp = method("/catalog/genre/9999/update", data={"name": "Whatever"})
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/catalog/genres")


def test_genre_update_overwrites_without_validation(client, catalog):
    poetry = catalog["poetry"]
    resp = client.post(f"/catalog/genre/{poetry}/update", data={"name": "ab", "description": "Short & sweet"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith(f"/catalog/genre/{poetry}")
    with get_session() as sess:
        genre = sess.get(Genre, poetry)
        assert genre.name == "ab"
        assert genre.description == "Short & sweet"
