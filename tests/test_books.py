import json
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from bookverse.core.config import settings
from bookverse.crud.book import crud_book
from bookverse.crud.review import crud_review
from bookverse.models.book import Book
from bookverse.models.chapter import Chapter, Subchapter
from bookverse.models.review import Review
from bookverse.schemas.review import ReviewCreate
from bookverse.services.storage_service import storage_service

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def book_form(**overrides):
    form = {
        "title": "Winds of Paper",
        "author": "Lio Marsh",
        "description": "Letters carried across a sea.",
        "genre": "Fantasy",
        "language": "English",
        "content": " ".join(["page"] * 251),
    }
    form.update(overrides)
    return form


class TestListBooks:
    def test_lists_public_books_only(self, client: TestClient, test_book, private_book):
        response = client.get("/api/books/")
        assert response.status_code == 200
        data = response.json()["data"]
        ids = [book["id"] for book in data["books"]]
        assert ids == [test_book.id]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}

    def test_books_carry_rating(self, client: TestClient, test_book):
        book = client.get("/api/books/").json()["data"]["books"][0]
        assert book["rating"] == 0.0
        assert book["review_count"] == 0
        assert book["uploader"]["name"] == "Test Reader"

    def test_newest_first_and_paged(self, client: TestClient, make_book):
        first = make_book(title="First")
        second = make_book(title="Second")
        third = make_book(title="Third")

        response = client.get("/api/books/?page=2&limit=2")
        data = response.json()["data"]
        assert [book["id"] for book in data["books"]] == [first.id]
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

        response = client.get("/api/books/?page=1&limit=2")
        assert [book["id"] for book in response.json()["data"]["books"]] == [third.id, second.id]

    def test_filter_by_genre_and_language(self, client: TestClient, make_book):
        make_book(title="Poems", genre="Poetry", language="French")
        make_book(title="Tales", genre="Fantasy", language="English")

        data = client.get("/api/books/?genre=Poetry").json()["data"]
        assert [book["title"] for book in data["books"]] == ["Poems"]

        data = client.get("/api/books/?language=English").json()["data"]
        assert [book["title"] for book in data["books"]] == ["Tales"]

    def test_invalid_page(self, client: TestClient):
        response = client.get("/api/books/?page=0")
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"].startswith("page")


class TestSearchBooks:
    def test_search_matches_title_author_description(self, client: TestClient, make_book):
        make_book(title="Ocean Song", author="Kai", description="Waves")
        make_book(title="Desert", author="OCEANA Writer", description="Sand")
        make_book(title="Forest", author="Ren", description="Trees by the ocean")
        make_book(title="Mountain", author="Ivo", description="Snow")

        response = client.get("/api/books/search?q=ocean")
        assert response.status_code == 200
        titles = sorted(book["title"] for book in response.json()["data"])
        assert titles == ["Desert", "Forest", "Ocean Song"]

    def test_search_excludes_private(self, client: TestClient, private_book):
        response = client.get("/api/books/search?q=Drafts")
        assert response.json()["data"] == []

    def test_search_min_rating(
        self, client: TestClient, db_session: Session, make_book, test_user, test_user_2
    ):
        good = make_book(title="Good")
        poor = make_book(title="Poor")
        crud_review.create_for_user(
            db_session, obj_in=ReviewCreate(book_id=good.id, rating=5, comment="Great"), user_id=test_user_2.id
        )
        crud_review.create_for_user(
            db_session, obj_in=ReviewCreate(book_id=poor.id, rating=2, comment="Meh"), user_id=test_user_2.id
        )

        response = client.get("/api/books/search?rating=4")
        data = response.json()["data"]
        assert [book["title"] for book in data] == ["Good"]
        assert data[0]["rating"] == 5.0


class TestFeaturedAndGenre:
    def test_featured_limited_to_ten(self, client: TestClient, make_book):
        for i in range(12):
            make_book(title=f"Book {i}")

        data = client.get("/api/books/featured").json()["data"]
        assert len(data) == 10
        assert data[0]["title"] == "Book 11"

    def test_books_by_genre(self, client: TestClient, make_book):
        make_book(title="Scary", genre="Horror")
        make_book(title="Scarier", genre="Horror")
        make_book(title="Calm", genre="Drama")

        data = client.get("/api/books/genre/Horror").json()["data"]
        assert [book["title"] for book in data] == ["Scarier", "Scary"]

        data = client.get("/api/books/genre/Horror?limit=1").json()["data"]
        assert len(data) == 1


class TestBookDetail:
    def test_get_book(self, client: TestClient, test_book):
        response = client.get(f"/api/books/{test_book.id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "The Silent Library"
        assert data["content"]
        assert data["uploader"]["id"] == test_book.uploaded_by
        assert data["chapters"] == []
        assert data["rating"] == 0.0

    def test_get_private_book_by_id(self, client: TestClient, private_book):
        response = client.get(f"/api/books/{private_book.id}")
        assert response.status_code == 200

    def test_get_missing_book(self, client: TestClient):
        response = client.get("/api/books/99999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Book not found"}


class TestCreateBook:
    def test_create_book_with_chapters(self, client: TestClient, auth_headers, test_user):
        chapters = [
            {
                "title": "Arrival",
                "start_page": 1,
                "end_page": 10,
                "subchapters": [{"title": "Dock", "page": 2}, {"title": "Gate", "page": 6}],
            },
            {"title": "Departure", "start_page": 11, "end_page": 20},
        ]
        response = client.post(
            "/api/books/",
            data=book_form(chapters=json.dumps(chapters), is_public="true"),
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["uploaded_by"] == test_user.id
        assert data["is_public"] is True
        assert data["page_count"] == 2
        assert data["cover_image"] == settings.DEFAULT_COVER_IMAGE
        assert [c["title"] for c in data["chapters"]] == ["Arrival", "Departure"]
        assert [c["order"] for c in data["chapters"]] == [1, 2]
        subchapters = data["chapters"][0]["subchapters"]
        assert [(s["title"], s["order"]) for s in subchapters] == [("Dock", 1), ("Gate", 2)]

    def test_create_book_private_by_default(self, client: TestClient, auth_headers):
        response = client.post("/api/books/", data=book_form(), headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["data"]["is_public"] is False

    def test_create_book_missing_title(self, client: TestClient, db_session: Session, auth_headers):
        form = book_form()
        del form["title"]
        response = client.post("/api/books/", data=form, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Title is required"}
        assert db_session.query(Book).count() == 0

    def test_create_book_blank_content(self, client: TestClient, auth_headers):
        response = client.post("/api/books/", data=book_form(content="  "), headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Content is required"

    def test_create_book_bad_chapters(self, client: TestClient, db_session: Session, auth_headers):
        response = client.post(
            "/api/books/", data=book_form(chapters="{not json"), headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Chapters must be a valid JSON array"
        assert db_session.query(Chapter).count() == 0

    def test_create_book_null_subchapters(self, client: TestClient, auth_headers):
        chapters = [{"title": "Solo", "subchapters": None}]
        response = client.post(
            "/api/books/", data=book_form(chapters=json.dumps(chapters)), headers=auth_headers
        )
        assert response.status_code == 201
        chapter = response.json()["data"]["chapters"][0]
        assert chapter["title"] == "Solo"
        assert chapter["subchapters"] == []

    def test_create_book_reports_genre_before_description(self, client: TestClient, auth_headers):
        form = book_form()
        del form["description"]
        del form["genre"]
        response = client.post("/api/books/", data=form, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Genre is required"

    def test_create_book_requires_auth(self, client: TestClient):
        response = client.post("/api/books/", data=book_form())
        assert response.status_code == 401

    def test_create_book_with_cover(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/books/",
            data=book_form(),
            files={"cover_image": ("cover.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        )
        assert response.status_code == 201
        cover = response.json()["data"]["cover_image"]
        assert "/uploads/coverImage-" in cover
        file_name = cover.rsplit("/", 1)[1]
        assert os.path.exists(os.path.join(settings.UPLOAD_FOLDER, file_name))

        served = client.get(f"/uploads/{file_name}")
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_create_book_rejects_non_image(self, client: TestClient, db_session: Session, auth_headers):
        response = client.post(
            "/api/books/",
            data=book_form(),
            files={"cover_image": ("notes.txt", b"hello", "text/plain")},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("Only image files are allowed")
        assert db_session.query(Book).count() == 0


class TestUpdateBook:
    def test_owner_updates_book(self, client: TestClient, auth_headers, test_book):
        response = client.put(
            f"/api/books/{test_book.id}",
            data={"title": "Renamed", "content": " ".join(["w"] * 1000), "author": ""},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Renamed"
        assert data["author"] == "Ada Quill"
        assert data["page_count"] == 4

    def test_toggle_visibility(self, client: TestClient, auth_headers, test_book):
        response = client.put(
            f"/api/books/{test_book.id}", data={"is_public": "false"}, headers=auth_headers
        )
        assert response.json()["data"]["is_public"] is False

    def test_replacing_cover_removes_old_file(self, client: TestClient, auth_headers):
        created = client.post(
            "/api/books/",
            data=book_form(),
            files={"cover_image": ("a.png", PNG_BYTES, "image/png")},
            headers=auth_headers,
        ).json()["data"]
        old_name = created["cover_image"].rsplit("/", 1)[1]

        response = client.put(
            f"/api/books/{created['id']}",
            files={"cover_image": ("b.jpg", b"\xff\xd8\xff" + b"\x00" * 16, "image/jpeg")},
            headers=auth_headers,
        )
        assert response.status_code == 200
        new_name = response.json()["data"]["cover_image"].rsplit("/", 1)[1]
        assert new_name != old_name
        assert not os.path.exists(os.path.join(settings.UPLOAD_FOLDER, old_name))
        assert os.path.exists(os.path.join(settings.UPLOAD_FOLDER, new_name))

    def test_failed_update_discards_new_cover(
        self, client: TestClient, db_session: Session, auth_headers, test_book, monkeypatch
    ):
        saved = []
        real_save = storage_service.save_cover

        def recording_save(**kwargs):
            url = real_save(**kwargs)
            saved.append(url)
            return url

        def failing_update(*args, **kwargs):
            raise RuntimeError("write failed")

        monkeypatch.setattr(storage_service, "save_cover", recording_save)
        monkeypatch.setattr(crud_book, "update", failing_update)

        book_id = test_book.id
        with pytest.raises(RuntimeError):
            client.put(
                f"/api/books/{book_id}",
                data={"title": "Never Saved"},
                files={"cover_image": ("c.png", PNG_BYTES, "image/png")},
                headers=auth_headers,
            )

        assert len(saved) == 1
        file_name = saved[0].rsplit("/", 1)[1]
        assert not os.path.exists(os.path.join(settings.UPLOAD_FOLDER, file_name))
        db_session.expire_all()
        book = db_session.get(Book, book_id)
        assert book.title == "The Silent Library"
        assert book.cover_image == settings.DEFAULT_COVER_IMAGE

    def test_non_owner_cannot_update(
        self, client: TestClient, db_session: Session, auth_headers_2, test_book
    ):
        book_id = test_book.id
        response = client.put(
            f"/api/books/{book_id}", data={"title": "Hijacked"}, headers=auth_headers_2
        )
        assert response.status_code == 403
        assert response.json()["message"] == "You can only update your own books"
        db_session.expire_all()
        assert db_session.get(Book, book_id).title == "The Silent Library"

    def test_update_missing_book(self, client: TestClient, auth_headers):
        response = client.put("/api/books/99999", data={"title": "X"}, headers=auth_headers)
        assert response.status_code == 404


class TestDeleteBook:
    def test_owner_deletes_book(
        self, client: TestClient, db_session: Session, auth_headers, test_book, test_user_2
    ):
        book_id = test_book.id
        crud_review.create_for_user(
            db_session, obj_in=ReviewCreate(book_id=book_id, rating=4, comment="Nice"), user_id=test_user_2.id
        )

        response = client.delete(f"/api/books/{book_id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Book deleted successfully"}

        assert client.get(f"/api/books/{book_id}").status_code == 404
        assert db_session.query(Review).filter(Review.book_id == book_id).count() == 0

    def test_delete_cascades_chapters(self, client: TestClient, db_session: Session, auth_headers):
        chapters = [{"title": "One", "subchapters": [{"title": "One.a"}]}]
        created = client.post(
            "/api/books/", data=book_form(chapters=json.dumps(chapters)), headers=auth_headers
        ).json()["data"]

        client.delete(f"/api/books/{created['id']}", headers=auth_headers)
        assert db_session.query(Chapter).count() == 0
        assert db_session.query(Subchapter).count() == 0

    def test_non_owner_cannot_delete(self, client: TestClient, db_session: Session, auth_headers_2, test_book):
        book_id = test_book.id
        response = client.delete(f"/api/books/{book_id}", headers=auth_headers_2)
        assert response.status_code == 403
        assert response.json()["message"] == "You can only delete your own books"
        assert db_session.get(Book, book_id) is not None
