import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.orm import Session

from bookverse.models.review import Review
from bookverse.schemas.review import RatingSummary

logger = logging.getLogger(__name__)

BookSchema = TypeVar("BookSchema", bound=BaseModel)
ItemSchema = TypeVar("ItemSchema", bound=BaseModel)

_ONE_DECIMAL = Decimal("0.1")


class RatingService:
    """Aggregates review ratings into a per-book mean and count.

    Nothing is cached; every call reads the reviews table so a new, edited or
    deleted review is visible on the next request.
    """

    @staticmethod
    def summarize(ratings: Iterable[int]) -> RatingSummary:
        """Mean rounded to one decimal (half away from zero) plus the count."""
        ratings = list(ratings)
        if not ratings:
            return RatingSummary(rating=0.0, review_count=0)
        return RatingService._from_totals(sum(ratings), len(ratings))

    @staticmethod
    def _from_totals(total: int, count: int) -> RatingSummary:
        if count == 0:
            return RatingSummary(rating=0.0, review_count=0)
        mean = (Decimal(total) / Decimal(count)).quantize(
            _ONE_DECIMAL, rounding=ROUND_HALF_UP
        )
        return RatingSummary(rating=float(mean), review_count=count)

    def aggregate(self, db: Session, book_id: int) -> RatingSummary:
        return self.aggregate_many(db, [book_id])[book_id]

    def aggregate_many(
        self, db: Session, book_ids: Sequence[int]
    ) -> Dict[int, RatingSummary]:
        """One grouped query for a whole page of books."""
        ids = list(dict.fromkeys(book_ids))
        summaries = {book_id: RatingSummary() for book_id in ids}
        if not ids:
            return summaries

        rows = (
            db.query(
                Review.book_id,
                func.sum(Review.rating),
                func.count(Review.id),
            )
            .filter(Review.book_id.in_(ids))
            .group_by(Review.book_id)
            .all()
        )
        for book_id, total, count in rows:
            summaries[book_id] = self._from_totals(int(total or 0), int(count))
        return summaries

    def rate_books(
        self,
        db: Session,
        books: List[BookSchema],
        summaries: Optional[Dict[int, RatingSummary]] = None,
    ) -> List[BookSchema]:
        """Return copies of the book schemas with rating and review_count set."""
        if summaries is None:
            summaries = self.aggregate_many(db, [book.id for book in books])
        return [
            book.model_copy(update=summaries.get(book.id, RatingSummary()).model_dump())
            for book in books
        ]

    def rate_book(self, db: Session, book: BookSchema) -> BookSchema:
        return self.rate_books(db, [book])[0]

    def rate_items(self, db: Session, items: List[ItemSchema]) -> List[ItemSchema]:
        """Rate the nested ``book`` of library rows (bookmarks, downloads, ...)."""
        summaries = self.aggregate_many(
            db, [item.book.id for item in items if item.book is not None]
        )
        rated = []
        for item in items:
            if item.book is not None:
                book = self.rate_books(db, [item.book], summaries)[0]
                item = item.model_copy(update={"book": book})
            rated.append(item)
        return rated


# Create a singleton instance
rating_service = RatingService()
