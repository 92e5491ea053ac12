import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from bookverse.core.auth import get_current_user
from bookverse.core.config import settings
from bookverse.core.database import get_db
from bookverse.core.exceptions import AuthorizationError, BookNotFound
from bookverse.crud.book import crud_book
from bookverse.models.book import Book
from bookverse.models.user import User
from bookverse.schemas.book import (
    BookCreate,
    BookDetail,
    BookPage,
    BookResponse,
    BookUpdate,
)
from bookverse.schemas.response import (
    CreateResponse,
    ListResponse,
    MessageResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)
from bookverse.services.rating_service import rating_service
from bookverse.services.storage_service import storage_service
from bookverse.utils.pagination import get_offset, paginate

logger = logging.getLogger(__name__)

router = APIRouter()


def _rated(db: Session, books: List[Book]) -> List[BookResponse]:
    return rating_service.rate_books(
        db, [BookResponse.model_validate(book) for book in books]
    )


def _rated_detail(db: Session, book: Book) -> BookDetail:
    return rating_service.rate_book(db, BookDetail.model_validate(book))


def _save_cover(request: Request, cover_image: Optional[UploadFile]) -> Optional[str]:
    if cover_image is None or not cover_image.filename:
        return None
    return storage_service.save_cover(
        file_content=cover_image.file.read(),
        file_name=cover_image.filename,
        content_type=cover_image.content_type,
        base_url=str(request.base_url),
    )


def _get_owned_book(db: Session, book_id: int, user: User, action: str) -> Book:
    book = crud_book.get(db, id=book_id)
    if not book:
        raise BookNotFound()
    if book.uploaded_by != user.id:
        raise AuthorizationError(f"You can only {action} your own books")
    return book


@router.get("/", response_model=SuccessResponse[BookPage])
def read_books(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1),
    genre: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
) -> Any:
    """
    Public books, newest first, with pagination metadata.
    """
    books, total = crud_book.get_public_multi(
        db,
        skip=get_offset(page, limit),
        limit=limit,
        genre=genre,
        language=language,
    )
    return SuccessResponse(
        message=Messages.BOOKS_RETRIEVED,
        data=BookPage(books=_rated(db, books), pagination=paginate(page, limit, total)),
    )


@router.get("/search", response_model=ListResponse[BookResponse])
def search_books(
    db: Session = Depends(get_db),
    q: Optional[str] = Query(None),
    genre: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    rating: Optional[float] = Query(None, description="Minimum average rating"),
) -> Any:
    books = _rated(db, crud_book.search(db, q=q, genre=genre, language=language))
    if rating is not None:
        books = [book for book in books if book.rating >= rating]
    return ListResponse(message=Messages.SEARCH_COMPLETED, data=books)


@router.get("/featured", response_model=ListResponse[BookResponse])
def read_featured_books(db: Session = Depends(get_db)) -> Any:
    books = crud_book.get_featured(db, limit=settings.FEATURED_BOOKS_LIMIT)
    return ListResponse(message=Messages.BOOKS_RETRIEVED, data=_rated(db, books))


@router.get("/genre/{genre}", response_model=ListResponse[BookResponse])
def read_books_by_genre(
    genre: str,
    db: Session = Depends(get_db),
    limit: int = Query(settings.GENRE_PAGE_SIZE, ge=1),
) -> Any:
    books = crud_book.get_by_genre(db, genre=genre, limit=limit)
    return ListResponse(message=Messages.BOOKS_RETRIEVED, data=_rated(db, books))


@router.get("/{book_id}", response_model=SuccessResponse[BookDetail])
def read_book(book_id: int, db: Session = Depends(get_db)) -> Any:
    """
    Book with uploader, ordered chapters and their ordered subchapters.
    """
    book = crud_book.get_with_details(db, id=book_id)
    if not book:
        raise BookNotFound()
    return SuccessResponse(message=Messages.DATA_RETRIEVED, data=_rated_detail(db, book))


@router.post(
    "/",
    response_model=CreateResponse[BookDetail],
    status_code=status.HTTP_201_CREATED,
)
def create_book(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    is_public: Optional[str] = Form(None),
    chapters: Optional[str] = Form(None, description="JSON array of chapters"),
    cover_image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Upload a book (multipart form) with optional chapters and cover image.
    """
    book_in = BookCreate(
        title=title,
        author=author,
        description=description,
        genre=genre,
        language=language,
        content=content,
        is_public=is_public,
        chapters=chapters,
    )

    cover_url = _save_cover(request, cover_image)
    try:
        book = crud_book.create_with_chapters(
            db, obj_in=book_in, user_id=current_user.id, cover_image=cover_url
        )
    except Exception:
        storage_service.delete_file(cover_url)
        raise

    book = crud_book.get_with_details(db, id=book.id)
    return CreateResponse(message=Messages.BOOK_CREATED, data=_rated_detail(db, book))


@router.put("/{book_id}", response_model=UpdateResponse[BookDetail])
def update_book(
    book_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    language: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    is_public: Optional[str] = Form(None),
    cover_image: Optional[UploadFile] = File(None),
) -> Any:
    """
    Update a book owned by the current user. Only provided fields change.
    """
    book = _get_owned_book(db, book_id, current_user, "update")

    book_in = BookUpdate(
        title=title,
        author=author,
        description=description,
        genre=genre,
        language=language,
        content=content,
        is_public=is_public,
    )
    update_data = book_in.model_dump(exclude_none=True)

    old_cover = book.cover_image
    cover_url = _save_cover(request, cover_image)
    if cover_url:
        update_data["cover_image"] = cover_url

    try:
        book = crud_book.update(db, db_obj=book, obj_in=update_data)
    except Exception:
        storage_service.delete_file(cover_url)
        raise

    if cover_url and old_cover != cover_url:
        storage_service.delete_file(old_cover)

    book = crud_book.get_with_details(db, id=book.id)
    return UpdateResponse(message=Messages.BOOK_UPDATED, data=_rated_detail(db, book))


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    book = _get_owned_book(db, book_id, current_user, "delete")
    cover = book.cover_image

    crud_book.remove(db, id=book_id)
    storage_service.delete_file(cover)
    return MessageResponse(message=Messages.BOOK_DELETED)
