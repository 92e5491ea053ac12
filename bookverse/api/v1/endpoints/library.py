from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from bookverse.core.auth import get_current_user
from bookverse.core.config import settings
from bookverse.core.database import get_db
from bookverse.core.exceptions import BookNotFound, ConflictError, NotFoundError
from bookverse.crud.book import crud_book
from bookverse.crud.bookmark import crud_bookmark
from bookverse.crud.download import crud_download
from bookverse.crud.library_item import crud_library_item
from bookverse.crud.reading_progress import crud_reading_progress
from bookverse.crud.recently_read import crud_recently_read
from bookverse.models.user import User
from bookverse.schemas.library import (
    BookmarkResponse,
    BookmarkUpsert,
    DownloadCreate,
    DownloadResponse,
    LibraryItemCreate,
    LibraryItemResponse,
    ReadingProgressResponse,
    ReadingProgressUpsert,
    RecentlyReadCreate,
    RecentlyReadResponse,
)
from bookverse.schemas.response import (
    APIResponse,
    CreateResponse,
    ListResponse,
    MessageResponse,
    Messages,
)
from bookverse.services.rating_service import rating_service

router = APIRouter()


def _ensure_book(db: Session, book_id: int) -> None:
    if not crud_book.get(db, id=book_id):
        raise BookNotFound()


def _rated(db: Session, rows: list, schema) -> list:
    return rating_service.rate_items(db, [schema.model_validate(row) for row in rows])


def _upsert_status(response: Response, row) -> bool:
    """201 for a freshly inserted row, 200 when an existing one was updated."""
    created = row.updated_at is None
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return created


# Library


@router.get("/", response_model=ListResponse[LibraryItemResponse])
def read_library(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    items = crud_library_item.get_multi_by_user(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.LIBRARY_RETRIEVED,
        data=_rated(db, items, LibraryItemResponse),
    )


@router.post(
    "/",
    response_model=CreateResponse[LibraryItemResponse],
    status_code=status.HTTP_201_CREATED,
)
def add_to_library(
    *,
    db: Session = Depends(get_db),
    item_in: LibraryItemCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    _ensure_book(db, item_in.book_id)

    item = crud_library_item.add(db, user_id=current_user.id, book_id=item_in.book_id)
    if item is None:
        raise ConflictError(Messages.LIBRARY_ITEM_EXISTS)

    return CreateResponse(
        message=Messages.LIBRARY_ITEM_ADDED,
        data=_rated(db, [item], LibraryItemResponse)[0],
    )


@router.delete("/{book_id}", response_model=MessageResponse)
def remove_from_library(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    if not crud_library_item.remove_by_user_and_book(
        db, user_id=current_user.id, book_id=book_id
    ):
        raise NotFoundError(Messages.LIBRARY_ITEM_NOT_FOUND)
    return MessageResponse(message=Messages.LIBRARY_ITEM_REMOVED)


# Bookmarks


@router.get("/bookmarks", response_model=ListResponse[BookmarkResponse])
def read_bookmarks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    bookmarks = crud_bookmark.get_multi_by_user(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.BOOKMARKS_RETRIEVED,
        data=_rated(db, bookmarks, BookmarkResponse),
    )


@router.post(
    "/bookmarks",
    response_model=APIResponse[BookmarkResponse],
    status_code=status.HTTP_201_CREATED,
)
def save_bookmark(
    *,
    db: Session = Depends(get_db),
    response: Response,
    bookmark_in: BookmarkUpsert,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Create the caller's bookmark for a book, or move the existing one.
    """
    _ensure_book(db, bookmark_in.book_id)

    bookmark = crud_bookmark.upsert_for_user(db, obj_in=bookmark_in, user_id=current_user.id)
    created = _upsert_status(response, bookmark)
    return APIResponse(
        message=Messages.BOOKMARK_CREATED if created else Messages.BOOKMARK_UPDATED,
        data=_rated(db, [bookmark], BookmarkResponse)[0],
    )


@router.delete("/bookmarks/{book_id}", response_model=MessageResponse)
def remove_bookmark(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    if not crud_bookmark.remove_by_user_and_book(
        db, user_id=current_user.id, book_id=book_id
    ):
        raise NotFoundError(Messages.BOOKMARK_NOT_FOUND)
    return MessageResponse(message=Messages.BOOKMARK_REMOVED)


# Reading progress


@router.get("/progress", response_model=ListResponse[ReadingProgressResponse])
def read_progress(
    db: Session = Depends(get_db),
    book_id: Optional[int] = Query(None),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Progress records, newest first, narrowed to ``book_id`` when given.
    """
    records = crud_reading_progress.get_multi_by_user(
        db, user_id=current_user.id, book_id=book_id
    )
    return ListResponse(
        message=Messages.READING_PROGRESS_RETRIEVED,
        data=_rated(db, records, ReadingProgressResponse),
    )


@router.post(
    "/progress",
    response_model=APIResponse[ReadingProgressResponse],
    status_code=status.HTTP_201_CREATED,
)
def save_progress(
    *,
    db: Session = Depends(get_db),
    response: Response,
    progress_in: ReadingProgressUpsert,
    current_user: User = Depends(get_current_user),
) -> Any:
    _ensure_book(db, progress_in.book_id)

    progress = crud_reading_progress.upsert_for_user(
        db, obj_in=progress_in, user_id=current_user.id
    )
    created = _upsert_status(response, progress)
    return APIResponse(
        message=(
            Messages.READING_PROGRESS_CREATED
            if created
            else Messages.READING_PROGRESS_UPDATED
        ),
        data=_rated(db, [progress], ReadingProgressResponse)[0],
    )


# Recently read


@router.get("/recently-read", response_model=ListResponse[RecentlyReadResponse])
def read_recently_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    entries = crud_recently_read.get_recent_by_user(
        db, user_id=current_user.id, limit=settings.RECENTLY_READ_LIMIT
    )
    return ListResponse(
        message=Messages.RECENTLY_READ_RETRIEVED,
        data=_rated(db, entries, RecentlyReadResponse),
    )


@router.post(
    "/recently-read",
    response_model=APIResponse[RecentlyReadResponse],
    status_code=status.HTTP_201_CREATED,
)
def mark_recently_read(
    *,
    db: Session = Depends(get_db),
    response: Response,
    entry_in: RecentlyReadCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    _ensure_book(db, entry_in.book_id)

    entry = crud_recently_read.touch(db, user_id=current_user.id, book_id=entry_in.book_id)
    created = _upsert_status(response, entry)
    return APIResponse(
        message=Messages.RECENTLY_READ_ADDED if created else Messages.RECENTLY_READ_UPDATED,
        data=_rated(db, [entry], RecentlyReadResponse)[0],
    )


# Downloads


@router.get("/downloads", response_model=ListResponse[DownloadResponse])
def read_downloads(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    downloads = crud_download.get_multi_by_user(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.DOWNLOADS_RETRIEVED,
        data=_rated(db, downloads, DownloadResponse),
    )


@router.post(
    "/downloads",
    response_model=CreateResponse[DownloadResponse],
    status_code=status.HTTP_201_CREATED,
)
def record_download(
    *,
    db: Session = Depends(get_db),
    download_in: DownloadCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    _ensure_book(db, download_in.book_id)

    download = crud_download.record(db, user_id=current_user.id, book_id=download_in.book_id)
    if download is None:
        raise ConflictError(Messages.DOWNLOAD_EXISTS)

    return CreateResponse(
        message=Messages.DOWNLOAD_ADDED,
        data=_rated(db, [download], DownloadResponse)[0],
    )


@router.delete("/downloads/{book_id}", response_model=MessageResponse)
def remove_download(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    if not crud_download.remove_by_user_and_book(
        db, user_id=current_user.id, book_id=book_id
    ):
        raise NotFoundError(Messages.DOWNLOAD_NOT_FOUND)
    return MessageResponse(message=Messages.DOWNLOAD_REMOVED)
