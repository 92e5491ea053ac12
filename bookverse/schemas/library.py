from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from bookverse.schemas.book import BookResponse


class BookRef(BaseModel):
    book_id: int


class LibraryItemCreate(BookRef):
    pass


class DownloadCreate(BookRef):
    pass


class RecentlyReadCreate(BookRef):
    pass


class BookmarkUpsert(BookRef):
    page: Optional[int] = None
    note: Optional[str] = None


class ReadingProgressUpsert(BookRef):
    current_page: int
    total_pages: int

    @field_validator("current_page")
    @classmethod
    def current_page_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Current page must be a positive integer")
        return v

    @field_validator("total_pages")
    @classmethod
    def total_pages_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Total pages must be a positive integer")
        return v


class UserBookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    book_id: int
    book: Optional[BookResponse] = None


class LibraryItemResponse(UserBookResponse):
    added_at: Optional[datetime] = None


class BookmarkResponse(UserBookResponse):
    page: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReadingProgressResponse(UserBookResponse):
    current_page: int
    total_pages: int
    progress_percent: float
    last_read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecentlyReadResponse(UserBookResponse):
    read_at: Optional[datetime] = None


class DownloadResponse(UserBookResponse):
    downloaded_at: Optional[datetime] = None
