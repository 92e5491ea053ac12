from .book import Book
from .bookmark import Bookmark
from .chapter import Chapter, Subchapter
from .download import Download
from .library_item import LibraryItem
from .reading_progress import ReadingProgress
from .recently_read import RecentlyRead
from .review import Review
from .user import User

__all__ = [
    "User",
    "Book",
    "Chapter",
    "Subchapter",
    "Review",
    "LibraryItem",
    "Bookmark",
    "ReadingProgress",
    "RecentlyRead",
    "Download",
]
