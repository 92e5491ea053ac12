from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from bookverse.core.database import Base


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    author = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    genre = Column(String, nullable=False, index=True)
    language = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    cover_image = Column(String, nullable=True)
    page_count = Column(Integer, nullable=False, default=0)
    is_public = Column(Boolean, nullable=False, default=False, index=True)

    # Foreign Keys
    uploaded_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    uploader = relationship("User", back_populates="uploaded_books")
    chapters = relationship(
        "Chapter",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Chapter.order",
    )
    reviews = relationship(
        "Review", back_populates="book", cascade="all, delete-orphan", passive_deletes=True
    )
    library_items = relationship(
        "LibraryItem",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    bookmarks = relationship(
        "Bookmark", back_populates="book", cascade="all, delete-orphan", passive_deletes=True
    )
    reading_progress = relationship(
        "ReadingProgress",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    recently_read = relationship(
        "RecentlyRead",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    downloads = relationship(
        "Download", back_populates="book", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Book(id={self.id}, title='{self.title}')>"
