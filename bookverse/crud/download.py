from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.book import Book
from bookverse.models.download import Download
from bookverse.schemas.library import DownloadCreate


class CRUDDownload(CRUDUserBookBase[Download, DownloadCreate, DownloadCreate]):
    def get_multi_by_user(self, db: Session, *, user_id: int) -> List[Download]:
        return (
            db.query(Download)
            .options(joinedload(Download.book).joinedload(Book.uploader))
            .filter(Download.user_id == user_id)
            .order_by(Download.downloaded_at.desc(), Download.id.desc())
            .all()
        )

    def record(self, db: Session, *, user_id: int, book_id: int) -> Optional[Download]:
        return self.insert_if_absent(db, user_id=user_id, book_id=book_id)


crud_download = CRUDDownload(Download)
