from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.book import Book
from bookverse.models.library_item import LibraryItem
from bookverse.schemas.library import LibraryItemCreate


class CRUDLibraryItem(CRUDUserBookBase[LibraryItem, LibraryItemCreate, LibraryItemCreate]):
    def get_multi_by_user(self, db: Session, *, user_id: int) -> List[LibraryItem]:
        return (
            db.query(LibraryItem)
            .options(joinedload(LibraryItem.book).joinedload(Book.uploader))
            .filter(LibraryItem.user_id == user_id)
            .order_by(LibraryItem.added_at.desc(), LibraryItem.id.desc())
            .all()
        )

    def add(self, db: Session, *, user_id: int, book_id: int) -> Optional[LibraryItem]:
        return self.insert_if_absent(db, user_id=user_id, book_id=book_id)


crud_library_item = CRUDLibraryItem(LibraryItem)
