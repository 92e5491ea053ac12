import logging
import math
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from bookverse.core.config import settings
from bookverse.crud.base import CRUDBase
from bookverse.models.book import Book
from bookverse.models.chapter import Chapter, Subchapter
from bookverse.schemas.book import BookCreate, BookUpdate

logger = logging.getLogger(__name__)

WORDS_PER_PAGE = 250


def count_pages(content: str) -> int:
    """Rough page estimate from whitespace-separated words."""
    return math.ceil(len(content.split()) / WORDS_PER_PAGE)


class CRUDBook(CRUDBase[Book, BookCreate, BookUpdate]):
    def _public(self, db: Session) -> Query:
        return (
            db.query(Book)
            .options(joinedload(Book.uploader))
            .filter(Book.is_public == True)  # noqa: E712
        )

    @staticmethod
    def _newest_first(query: Query) -> Query:
        return query.order_by(Book.created_at.desc(), Book.id.desc())

    def create_with_chapters(
        self,
        db: Session,
        *,
        obj_in: BookCreate,
        user_id: int,
        cover_image: Optional[str] = None,
    ) -> Book:
        """Create the book and its chapter tree in one transaction."""
        db_obj = Book(
            title=obj_in.title,
            author=obj_in.author,
            description=obj_in.description,
            genre=obj_in.genre,
            language=obj_in.language,
            content=obj_in.content,
            cover_image=cover_image or settings.DEFAULT_COVER_IMAGE,
            page_count=count_pages(obj_in.content),
            is_public=obj_in.is_public,
            uploaded_by=user_id,
        )
        for chapter_index, chapter_in in enumerate(obj_in.chapters, start=1):
            chapter = Chapter(
                title=chapter_in.title,
                start_page=chapter_in.start_page,
                end_page=chapter_in.end_page,
                order=chapter_index,
            )
            for sub_index, sub_in in enumerate(chapter_in.subchapters, start=1):
                chapter.subchapters.append(
                    Subchapter(title=sub_in.title, page=sub_in.page, order=sub_index)
                )
            db_obj.chapters.append(chapter)

        try:
            db.add(db_obj)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"Failed to create book '{obj_in.title}' for user {user_id}")
            raise

        db.refresh(db_obj)
        logger.info(
            f"Created book {db_obj.id} with {len(obj_in.chapters)} chapters for user {user_id}"
        )
        return db_obj

    def get_with_details(self, db: Session, id: int) -> Optional[Book]:
        return (
            db.query(Book)
            .options(
                joinedload(Book.uploader),
                selectinload(Book.chapters).selectinload(Chapter.subchapters),
            )
            .filter(Book.id == id)
            .populate_existing()
            .first()
        )

    def get_public_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 20,
        genre: Optional[str] = None,
        language: Optional[str] = None,
    ) -> Tuple[List[Book], int]:
        query = self._public(db)
        if genre:
            query = query.filter(Book.genre == genre)
        if language:
            query = query.filter(Book.language == language)

        total = query.count()
        books = self._newest_first(query).offset(skip).limit(limit).all()
        return books, total

    def search(
        self,
        db: Session,
        *,
        q: Optional[str] = None,
        genre: Optional[str] = None,
        language: Optional[str] = None,
    ) -> List[Book]:
        query = self._public(db)
        if q:
            pattern = f"%{q}%"
            query = query.filter(
                Book.title.ilike(pattern)
                | Book.author.ilike(pattern)
                | Book.description.ilike(pattern)
            )
        if genre:
            query = query.filter(Book.genre == genre)
        if language:
            query = query.filter(Book.language == language)
        return self._newest_first(query).all()

    def get_featured(self, db: Session, *, limit: int = 10) -> List[Book]:
        return self._newest_first(self._public(db)).limit(limit).all()

    def get_by_genre(self, db: Session, *, genre: str, limit: int = 10) -> List[Book]:
        query = self._public(db).filter(Book.genre == genre)
        return self._newest_first(query).limit(limit).all()

    def update(
        self, db: Session, *, db_obj: Book, obj_in: Union[BookUpdate, Dict[str, Any]]
    ) -> Book:
        """Apply only provided fields; page count follows new content."""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        update_data = {k: v for k, v in update_data.items() if v is not None}
        if "content" in update_data:
            update_data["page_count"] = count_pages(update_data["content"])

        book = super().update(db, db_obj=db_obj, obj_in=update_data)
        logger.info(f"Updated book {book.id}: {sorted(update_data)}")
        return book

    def remove(self, db: Session, *, id: int) -> Optional[Book]:
        book = super().remove(db, id=id)
        if book is not None:
            logger.info(f"Deleted book {id}")
        return book


crud_book = CRUDBook(Book)
