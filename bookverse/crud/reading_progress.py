import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.book import Book
from bookverse.models.reading_progress import ReadingProgress
from bookverse.schemas.library import ReadingProgressUpsert

logger = logging.getLogger(__name__)


def calculate_progress_percent(current_page: int, total_pages: int) -> float:
    if total_pages <= 0:
        return 0.0
    return current_page / total_pages * 100


class CRUDReadingProgress(
    CRUDUserBookBase[ReadingProgress, ReadingProgressUpsert, ReadingProgressUpsert]
):
    def get_multi_by_user(
        self, db: Session, *, user_id: int, book_id: Optional[int] = None
    ) -> List[ReadingProgress]:
        query = (
            db.query(ReadingProgress)
            .options(joinedload(ReadingProgress.book).joinedload(Book.uploader))
            .filter(ReadingProgress.user_id == user_id)
        )
        if book_id is not None:
            query = query.filter(ReadingProgress.book_id == book_id)
        return (
            query.order_by(ReadingProgress.last_read_at.desc(), ReadingProgress.id.desc())
            .all()
        )

    def upsert_for_user(
        self, db: Session, *, obj_in: ReadingProgressUpsert, user_id: int
    ) -> ReadingProgress:
        now = datetime.now(timezone.utc)
        values = {
            "current_page": obj_in.current_page,
            "total_pages": obj_in.total_pages,
            "progress_percent": calculate_progress_percent(
                obj_in.current_page, obj_in.total_pages
            ),
            "last_read_at": now,
        }
        progress = self.upsert(
            db,
            user_id=user_id,
            book_id=obj_in.book_id,
            insert_values=values,
            update_values={**values, "updated_at": now},
        )
        logger.info(
            f"Progress for user {user_id}, book {obj_in.book_id}: "
            f"{progress.current_page}/{progress.total_pages}"
        )
        return progress


crud_reading_progress = CRUDReadingProgress(ReadingProgress)
