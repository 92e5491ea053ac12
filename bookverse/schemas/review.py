from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from bookverse.schemas.book import BookSummary
from bookverse.schemas.user import UserSummary
from bookverse.utils.pagination import Pagination


def _check_rating(v: int) -> int:
    if v < 1 or v > 5:
        raise ValueError("Rating must be between 1 and 5")
    return v


class ReviewCreate(BaseModel):
    book_id: int
    rating: int
    comment: str

    @field_validator("rating")
    @classmethod
    def rating_range(cls, v: int) -> int:
        return _check_rating(v)

    @field_validator("comment")
    @classmethod
    def comment_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment is required")
        return v


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def rating_range(cls, v: Optional[int]) -> Optional[int]:
        return v if v is None else _check_rating(v)

    @field_validator("comment")
    @classmethod
    def comment_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Comment cannot be empty")
        return v


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    book_id: int
    rating: int
    comment: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class ReviewWithBook(ReviewResponse):
    book: Optional[BookSummary] = None


class ReviewPage(BaseModel):
    reviews: List[ReviewResponse]
    pagination: Pagination


class RatingSummary(BaseModel):
    rating: float = 0.0
    review_count: int = 0
