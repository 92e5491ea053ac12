from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class Download(Base):
    __tablename__ = "downloads"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    downloaded_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="downloads")
    book = relationship("Book", back_populates="downloads")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="unique_user_book_download"),
    )

    def __repr__(self):
        return f"<Download(id={self.id}, user_id={self.user_id}, book_id={self.book_id})>"
