import logging
from typing import Any, Dict, Generic, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from bookverse.core.database import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to Create, Read, Update, Delete (CRUD).

        **Parameters**

        * `model`: A SQLAlchemy model class
        """
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, id: int) -> Optional[ModelType]:
        obj = db.get(self.model, id)
        if obj is None:
            return None
        db.delete(obj)
        db.commit()
        return obj


class CRUDUserBookBase(CRUDBase[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    CRUD for rows keyed by a unique (user_id, book_id) pair.

    Duplicate handling is pushed into a single INSERT ... ON CONFLICT statement
    so the database unique constraint arbitrates concurrent writers.
    """

    conflict_columns: Sequence[str] = ("user_id", "book_id")

    def _insert(self, db: Session):
        dialect = db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(self.model)
        if dialect == "sqlite":
            return sqlite.insert(self.model)
        raise NotImplementedError(f"Upsert is not supported for dialect {dialect}")

    def get_by_user_and_book(
        self, db: Session, *, user_id: int, book_id: int
    ) -> Optional[ModelType]:
        return (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.book_id == book_id)
            .populate_existing()
            .first()
        )

    def insert_if_absent(
        self, db: Session, *, user_id: int, book_id: int, values: Optional[Dict[str, Any]] = None
    ) -> Optional[ModelType]:
        """Insert the pair; return the new row, or None when it already existed."""
        stmt = (
            self._insert(db)
            .values(user_id=user_id, book_id=book_id, **(values or {}))
            .on_conflict_do_nothing(index_elements=list(self.conflict_columns))
        )
        try:
            result = db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise

        if result.rowcount == 0:
            logger.info(
                f"{self.model.__name__} already exists for user {user_id}, book {book_id}"
            )
            return None
        return self.get_by_user_and_book(db, user_id=user_id, book_id=book_id)

    def upsert(
        self,
        db: Session,
        *,
        user_id: int,
        book_id: int,
        insert_values: Dict[str, Any],
        update_values: Dict[str, Any],
    ) -> ModelType:
        """Insert the pair, or update the existing row in the same statement."""
        stmt = self._insert(db).values(
            user_id=user_id, book_id=book_id, **insert_values
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=list(self.conflict_columns), set_=update_values
        )
        try:
            db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get_by_user_and_book(db, user_id=user_id, book_id=book_id)

    def remove_by_user_and_book(
        self, db: Session, *, user_id: int, book_id: int
    ) -> bool:
        deleted = (
            db.query(self.model)
            .filter(self.model.user_id == user_id, self.model.book_id == book_id)
            .delete(synchronize_session="fetch")
        )
        db.commit()
        return deleted > 0

    def count_by_user(self, db: Session, *, user_id: int) -> int:
        return db.query(self.model).filter(self.model.user_id == user_id).count()
