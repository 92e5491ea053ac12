from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class ReadingProgress(Base):
    __tablename__ = "reading_progress"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys with proper cascade deletion
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Progress tracking
    current_page = Column(Integer, nullable=False)
    total_pages = Column(Integer, nullable=False)
    progress_percent = Column(Float, nullable=False, default=0.0)

    # Timestamps
    last_read_at = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="reading_progress")
    book = relationship("Book", back_populates="reading_progress")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="unique_user_book_progress"),
    )

    def __repr__(self):
        return f"<ReadingProgress(id={self.id}, user_id={self.user_id}, book_id={self.book_id}, progress={self.progress_percent}%)>"
