from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class LibraryItem(Base):
    __tablename__ = "library_items"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys with proper cascade deletion
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    added_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="library_items")
    book = relationship("Book", back_populates="library_items")

    # Constraints - One library entry per user per book
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="unique_user_book_library_item"),
    )

    def __repr__(self):
        return f"<LibraryItem(id={self.id}, user_id={self.user_id}, book_id={self.book_id})>"
