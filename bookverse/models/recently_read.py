from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class RecentlyRead(Base):
    __tablename__ = "recently_read"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    read_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="recently_read")
    book = relationship("Book", back_populates="recently_read")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="unique_user_book_recently_read"),
    )

    def __repr__(self):
        return f"<RecentlyRead(id={self.id}, user_id={self.user_id}, book_id={self.book_id})>"
