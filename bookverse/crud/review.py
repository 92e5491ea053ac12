import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from bookverse.crud.base import CRUDUserBookBase
from bookverse.models.review import Review
from bookverse.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


class CRUDReview(CRUDUserBookBase[Review, ReviewCreate, ReviewUpdate]):
    def get_with_relations(self, db: Session, id: int) -> Optional[Review]:
        return (
            db.query(Review)
            .options(joinedload(Review.user), joinedload(Review.book))
            .filter(Review.id == id)
            .first()
        )

    def get_by_book(
        self, db: Session, *, book_id: int, skip: int = 0, limit: int = 10
    ) -> Tuple[List[Review], int]:
        query = db.query(Review).filter(Review.book_id == book_id)
        total = query.count()
        reviews = (
            query.options(joinedload(Review.user))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return reviews, total

    def get_by_user(self, db: Session, *, user_id: int) -> List[Review]:
        return (
            db.query(Review)
            .options(joinedload(Review.book))
            .filter(Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def create_for_user(
        self, db: Session, *, obj_in: ReviewCreate, user_id: int
    ) -> Optional[Review]:
        """Insert the review unless the user already reviewed this book."""
        review = self.insert_if_absent(
            db,
            user_id=user_id,
            book_id=obj_in.book_id,
            values={"rating": obj_in.rating, "comment": obj_in.comment},
        )
        if review is not None:
            logger.info(f"User {user_id} reviewed book {obj_in.book_id}: {obj_in.rating}")
        return review

    def update(self, db: Session, *, db_obj: Review, obj_in: ReviewUpdate) -> Review:
        update_data = {
            k: v for k, v in obj_in.model_dump(exclude_unset=True).items() if v is not None
        }
        return super().update(db, db_obj=db_obj, obj_in=update_data)


crud_review = CRUDReview(Review)
