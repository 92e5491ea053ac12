from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.book import Book
from bookverse.models.recently_read import RecentlyRead
from bookverse.schemas.library import RecentlyReadCreate


class CRUDRecentlyRead(CRUDUserBookBase[RecentlyRead, RecentlyReadCreate, RecentlyReadCreate]):
    def get_recent_by_user(
        self, db: Session, *, user_id: int, limit: int = 20
    ) -> List[RecentlyRead]:
        return (
            db.query(RecentlyRead)
            .options(joinedload(RecentlyRead.book).joinedload(Book.uploader))
            .filter(RecentlyRead.user_id == user_id)
            .order_by(RecentlyRead.read_at.desc(), RecentlyRead.id.desc())
            .limit(limit)
            .all()
        )

    def touch(self, db: Session, *, user_id: int, book_id: int) -> RecentlyRead:
        """Record a read, refreshing read_at when the book was read before."""
        now = datetime.now(timezone.utc)
        return self.upsert(
            db,
            user_id=user_id,
            book_id=book_id,
            insert_values={"read_at": now},
            update_values={"read_at": now, "updated_at": now},
        )


crud_recently_read = CRUDRecentlyRead(RecentlyRead)
