import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from bookverse.schemas.user import UserSummary
from bookverse.utils.pagination import Pagination


class SubchapterIn(BaseModel):
    title: str
    page: Optional[int] = None


class ChapterIn(BaseModel):
    title: str
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    subchapters: List[SubchapterIn] = []

    @field_validator("subchapters", mode="before")
    @classmethod
    def null_subchapters(cls, v: Any) -> Any:
        return [] if v is None else v


def _parse_chapters(v: Any) -> Any:
    """Chapters arrive as a JSON-encoded array inside a multipart form."""
    if v is None or v == "":
        return []
    if isinstance(v, str):
        try:
            v = json.loads(v)
        except json.JSONDecodeError:
            raise ValueError("Chapters must be a valid JSON array")
    if not isinstance(v, list):
        raise ValueError("Chapters must be a valid JSON array")
    return v


class BookCreate(BaseModel):
    title: str
    author: str
    genre: str
    language: str
    description: str
    content: str
    is_public: bool = False
    chapters: List[ChapterIn] = []

    @field_validator(
        "title", "author", "genre", "language", "description", "content", mode="before"
    )
    @classmethod
    def required_text(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v

    @field_validator("is_public", mode="before")
    @classmethod
    def default_private(cls, v: Any) -> Any:
        return False if v is None or v == "" else v

    @field_validator("chapters", mode="before")
    @classmethod
    def parse_chapters(cls, v: Any) -> Any:
        return _parse_chapters(v)


class BookUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    content: Optional[str] = None
    is_public: Optional[bool] = None

    @field_validator(
        "title", "author", "description", "genre", "language", "content", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("is_public", mode="before")
    @classmethod
    def empty_is_unset(cls, v: Any) -> Any:
        return None if v == "" else v


class SubchapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    page: Optional[int] = None
    order: int


class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    start_page: Optional[int] = None
    end_page: Optional[int] = None
    order: int
    subchapters: List[SubchapterResponse] = []


class BookSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    cover_image: Optional[str] = None


class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    description: str
    genre: str
    language: str
    cover_image: Optional[str] = None
    page_count: int
    is_public: bool
    uploaded_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    uploader: Optional[UserSummary] = None

    # Aggregated from reviews at request time
    rating: float = 0.0
    review_count: int = 0


class BookDetail(BookResponse):
    content: str
    chapters: List[ChapterResponse] = []


class BookPage(BaseModel):
    books: List[BookResponse]
    pagination: Pagination
