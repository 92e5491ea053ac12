import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from sqlalchemy.orm import Session

from bookverse.core.auth import get_password_hash, verify_password
from bookverse.crud.base import CRUDBase
from bookverse.crud.bookmark import crud_bookmark
from bookverse.crud.library_item import crud_library_item
from bookverse.crud.review import crud_review
from bookverse.models.book import Book
from bookverse.models.user import User
from bookverse.schemas.user import UserCounts, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def default_avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random"


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def create(self, db: Session, *, obj_in: UserCreate) -> User:
        db_obj = User(
            email=obj_in.email,
            name=obj_in.name,
            hashed_password=get_password_hash(obj_in.password),
            avatar_url=default_avatar_url(obj_in.name),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Registered user {db_obj.id} <{db_obj.email}>")
        return db_obj

    def update(
        self, db: Session, *, db_obj: User, obj_in: Union[UserUpdate, Dict[str, Any]]
    ) -> User:
        """Apply only the non-empty profile fields."""
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        update_data = {k: v for k, v in update_data.items() if v}
        if not update_data:
            return db_obj
        return super().update(db, db_obj=db_obj, obj_in=update_data)

    def authenticate(
        self, db: Session, *, email: str, password: str
    ) -> Optional[User]:
        user = self.get_by_email(db, email=email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def change_password(self, db: Session, *, user: User, new_password: str) -> User:
        user.hashed_password = get_password_hash(new_password)
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Password changed for user {user.id}")
        return user

    def get_counts(self, db: Session, *, user_id: int) -> UserCounts:
        return UserCounts(
            uploaded_books=db.query(Book).filter(Book.uploaded_by == user_id).count(),
            library=crud_library_item.count_by_user(db, user_id=user_id),
            bookmarks=crud_bookmark.count_by_user(db, user_id=user_id),
            reviews=crud_review.count_by_user(db, user_id=user_id),
        )


crud_user = CRUDUser(User)
