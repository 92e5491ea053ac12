import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.book import Book
from bookverse.models.bookmark import Bookmark
from bookverse.schemas.library import BookmarkUpsert

logger = logging.getLogger(__name__)


class CRUDBookmark(CRUDUserBookBase[Bookmark, BookmarkUpsert, BookmarkUpsert]):
    def get_multi_by_user(self, db: Session, *, user_id: int) -> List[Bookmark]:
        return (
            db.query(Bookmark)
            .options(joinedload(Bookmark.book).joinedload(Book.uploader))
            .filter(Bookmark.user_id == user_id)
            .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
            .all()
        )

    def upsert_for_user(
        self, db: Session, *, obj_in: BookmarkUpsert, user_id: int
    ) -> Bookmark:
        """Create the bookmark, or overwrite only the fields sent on an existing one."""
        provided = obj_in.model_dump(include={"page", "note"}, exclude_unset=True)
        bookmark = self.upsert(
            db,
            user_id=user_id,
            book_id=obj_in.book_id,
            insert_values={"page": obj_in.page, "note": obj_in.note},
            update_values={**provided, "updated_at": datetime.now(timezone.utc)},
        )
        logger.info(f"Bookmark saved for user {user_id}, book {obj_in.book_id}")
        return bookmark


crud_bookmark = CRUDBookmark(Bookmark)
