"""
Tests for core infrastructure: error envelope, health check, tokens, storage.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from bookverse.core.config import settings
from bookverse.core.database import get_db
from bookverse.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    BookNotFound,
    ConflictError,
    DuplicateEmail,
    InvalidToken,
    NotFoundError,
    TokenExpired,
)
from bookverse.main import app, first_error_message
from bookverse.services.storage_service import storage_service
from bookverse.services.token_service import token_service


class TestHealth:
    def test_health_check(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["message"] == "BookVerse API is running"
        assert data["database"] == "connected"


class TestErrorEnvelope:
    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found"}

    def test_invalid_json_body(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/library/",
            content="not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_unexpected_error_is_500(self, db_session):
        def broken_db():
            raise RuntimeError("connection pool exploded")
            yield  # pragma: no cover

        app.dependency_overrides[get_db] = broken_db
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = client.get("/api/books/")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error occurred"}


class TestFirstErrorMessage:
    def test_missing_field(self):
        errors = [{"type": "missing", "loc": ("body", "title"), "msg": "Field required"}]
        assert first_error_message(errors) == "title is required"

    def test_value_error_prefix_stripped(self):
        errors = [
            {
                "type": "value_error",
                "loc": ("body", "rating"),
                "msg": "Value error, Rating must be between 1 and 5",
            }
        ]
        assert first_error_message(errors) == "Rating must be between 1 and 5"

    def test_other_errors_name_the_field(self):
        errors = [
            {"type": "int_parsing", "loc": ("query", "page"), "msg": "Input should be a valid integer"},
            {"type": "missing", "loc": ("body", "x"), "msg": "Field required"},
        ]
        assert first_error_message(errors) == "page: Input should be a valid integer"

    def test_no_errors(self):
        assert first_error_message([]) == "Invalid request data"


class TestExceptions:
    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (BadRequestError(), 400),
            (AuthenticationError(), 401),
            (AuthorizationError(), 403),
            (NotFoundError(), 404),
            (ConflictError(), 400),
            (BookNotFound(), 404),
            (DuplicateEmail(), 400),
            (InvalidToken(), 401),
            (TokenExpired(), 401),
        ],
    )
    def test_status_codes(self, exc, status_code):
        assert exc.status_code == status_code

    def test_authentication_error_sets_bearer_challenge(self):
        assert AuthenticationError().headers == {"WWW-Authenticate": "Bearer"}


class TestTokenService:
    def test_round_trip(self):
        token = token_service.create_access_token(42)
        assert token_service.verify_access_token(token) == 42

    def test_payload_fields(self):
        token = token_service.create_access_token(7)
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["user_id"] == 7
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_expired(self):
        token = token_service.create_access_token(1, expires_delta=timedelta(minutes=-1))
        with pytest.raises(TokenExpired):
            token_service.verify_access_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"user_id": 1, "type": "access"}, "other-secret", algorithm="HS256")
        with pytest.raises(InvalidToken):
            token_service.verify_access_token(token)

    def test_missing_user_id(self):
        token = jwt.encode({"type": "access"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        with pytest.raises(InvalidToken):
            token_service.verify_access_token(token)


class TestStorageService:
    def test_rejects_disallowed_extension(self):
        with pytest.raises(BadRequestError):
            storage_service.validate_image(b"data", "cover.bmp", "image/bmp")

    def test_rejects_mismatched_content_type(self):
        with pytest.raises(BadRequestError):
            storage_service.validate_image(b"data", "cover.png", "application/pdf")

    def test_rejects_oversized_file(self):
        too_big = b"\x00" * (settings.MAX_UPLOAD_SIZE + 1)
        with pytest.raises(BadRequestError) as exc_info:
            storage_service.validate_image(too_big, "cover.jpg", "image/jpeg")
        assert "10MB" in exc_info.value.detail

    def test_save_and_delete(self):
        url = storage_service.save_cover(b"gif", "x.GIF", "image/gif", "http://testserver/")
        assert url.startswith("http://testserver/uploads/coverImage-")
        assert url.endswith(".gif")
        assert storage_service.delete_file(url) is True

    def test_placeholder_is_not_deleted(self):
        assert storage_service.delete_file(settings.DEFAULT_COVER_IMAGE) is False
        assert storage_service.delete_file(None) is False
