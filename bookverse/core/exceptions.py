from typing import Dict, Optional

from fastapi import HTTPException, status


class BadRequestError(HTTPException):
    def __init__(self, detail: str = "Invalid request data"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationError(HTTPException):
    def __init__(
        self,
        detail: str = "Authentication required",
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers=headers or {"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """Uniqueness violation on create; reported as 400 like other bad requests."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class BookNotFound(NotFoundError):
    def __init__(self):
        super().__init__("Book not found")


class ReviewNotFound(NotFoundError):
    def __init__(self):
        super().__init__("Review not found")


class UserNotFound(AuthenticationError):
    def __init__(self):
        super().__init__("User not found")


class InvalidCredentials(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid email or password")


class InvalidToken(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid token")


class TokenExpired(AuthenticationError):
    def __init__(self):
        super().__init__("Token expired")


class DuplicateEmail(ConflictError):
    def __init__(self):
        super().__init__("Email already registered")


class DuplicateReview(ConflictError):
    def __init__(self):
        super().__init__("You have already reviewed this book")
