from .book import crud_book
from .bookmark import crud_bookmark
from .download import crud_download
from .library_item import crud_library_item
from .reading_progress import crud_reading_progress
from .recently_read import crud_recently_read
from .review import crud_review
from .user import crud_user

__all__ = [
    "crud_user",
    "crud_book",
    "crud_review",
    "crud_library_item",
    "crud_bookmark",
    "crud_reading_progress",
    "crud_recently_read",
    "crud_download",
]
