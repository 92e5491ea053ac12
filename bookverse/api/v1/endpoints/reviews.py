from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from bookverse.core.auth import get_current_user
from bookverse.core.config import settings
from bookverse.core.database import get_db
from bookverse.core.exceptions import (
    AuthorizationError,
    BookNotFound,
    DuplicateReview,
    ReviewNotFound,
)
from bookverse.crud.book import crud_book
from bookverse.crud.review import crud_review
from bookverse.models.review import Review
from bookverse.models.user import User
from bookverse.schemas.response import (
    CreateResponse,
    ListResponse,
    MessageResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)
from bookverse.schemas.review import (
    ReviewCreate,
    ReviewPage,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithBook,
)
from bookverse.utils.pagination import get_offset, paginate

router = APIRouter()


def _get_owned_review(db: Session, review_id: int, user: User, action: str) -> Review:
    review = crud_review.get(db, id=review_id)
    if not review:
        raise ReviewNotFound()
    if review.user_id != user.id:
        raise AuthorizationError(f"You can only {action} your own reviews")
    return review


@router.get("/book/{book_id}", response_model=SuccessResponse[ReviewPage])
def read_book_reviews(
    book_id: int,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.REVIEW_PAGE_SIZE, ge=1),
) -> Any:
    """
    Reviews of a book, newest first. An unknown book yields an empty page.
    """
    reviews, total = crud_review.get_by_book(
        db, book_id=book_id, skip=get_offset(page, limit), limit=limit
    )
    return SuccessResponse(
        message=Messages.REVIEWS_RETRIEVED,
        data=ReviewPage(
            reviews=[ReviewResponse.model_validate(review) for review in reviews],
            pagination=paginate(page, limit, total),
        ),
    )


@router.get("/user", response_model=ListResponse[ReviewWithBook])
def read_my_reviews(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    reviews = crud_review.get_by_user(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.REVIEWS_RETRIEVED,
        data=[ReviewWithBook.model_validate(review) for review in reviews],
    )


@router.post(
    "/",
    response_model=CreateResponse[ReviewWithBook],
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    *,
    db: Session = Depends(get_db),
    review_in: ReviewCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    if not crud_book.get(db, id=review_in.book_id):
        raise BookNotFound()

    review = crud_review.create_for_user(db, obj_in=review_in, user_id=current_user.id)
    if review is None:
        raise DuplicateReview()

    review = crud_review.get_with_relations(db, id=review.id)
    return CreateResponse(
        message=Messages.REVIEW_CREATED, data=ReviewWithBook.model_validate(review)
    )


@router.put("/{review_id}", response_model=UpdateResponse[ReviewWithBook])
def update_review(
    *,
    db: Session = Depends(get_db),
    review_id: int,
    review_in: ReviewUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    review = _get_owned_review(db, review_id, current_user, "update")
    review = crud_review.update(db, db_obj=review, obj_in=review_in)
    review = crud_review.get_with_relations(db, id=review.id)
    return UpdateResponse(
        message=Messages.REVIEW_UPDATED, data=ReviewWithBook.model_validate(review)
    )


@router.delete("/{review_id}", response_model=MessageResponse)
def delete_review(
    *,
    db: Session = Depends(get_db),
    review_id: int,
    current_user: User = Depends(get_current_user),
) -> Any:
    _get_owned_review(db, review_id, current_user, "delete")
    crud_review.remove(db, id=review_id)
    return MessageResponse(message=Messages.REVIEW_DELETED)
