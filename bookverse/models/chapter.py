from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from bookverse.core.database import Base


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    start_page = Column(Integer, nullable=True)
    end_page = Column(Integer, nullable=True)
    order = Column(Integer, nullable=False)

    # Foreign Keys with proper cascade deletion
    book_id = Column(
        Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    book = relationship("Book", back_populates="chapters")
    subchapters = relationship(
        "Subchapter",
        back_populates="chapter",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Subchapter.order",
    )

    def __repr__(self):
        return f"<Chapter(id={self.id}, title='{self.title}', order={self.order})>"


class Subchapter(Base):
    __tablename__ = "subchapters"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    page = Column(Integer, nullable=True)
    order = Column(Integer, nullable=False)

    chapter_id = Column(
        Integer,
        ForeignKey("chapters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    chapter = relationship("Chapter", back_populates="subchapters")

    def __repr__(self):
        return f"<Subchapter(id={self.id}, title='{self.title}', order={self.order})>"
