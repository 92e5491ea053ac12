from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys with proper cascade deletion
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    page = Column(Integer, nullable=True)
    note = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    # Stays NULL until the first upsert hits an existing row
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="bookmarks")
    book = relationship("Book", back_populates="bookmarks")

    # Constraints - One bookmark per user per book
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="unique_user_book_bookmark"),
    )

    def __repr__(self):
        return f"<Bookmark(id={self.id}, user_id={self.user_id}, book_id={self.book_id}, page={self.page})>"
