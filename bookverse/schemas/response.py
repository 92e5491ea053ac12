from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

# Generic type for data payload
T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API envelope: success flag, optional message, optional data"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class SuccessResponse(APIResponse[T]):
    """Success response with data"""

    success: bool = True
    message: Optional[str] = "Operation completed successfully"


class ErrorResponse(BaseModel):
    """Error envelope returned by the central exception handlers"""

    success: bool = False
    message: str = "An error occurred"


class CreateResponse(APIResponse[T]):
    """Response for create operations"""

    success: bool = True
    message: Optional[str] = "Created successfully"


class UpdateResponse(APIResponse[T]):
    """Response for update operations"""

    success: bool = True
    message: Optional[str] = "Updated successfully"


class MessageResponse(BaseModel):
    """Message-only response, used for deletions"""

    success: bool = True
    message: str = "Deleted successfully"


class ListResponse(APIResponse[List[T]]):
    """Response for list operations"""

    success: bool = True
    message: Optional[str] = "Data retrieved successfully"
    data: List[T] = []


# Specific success messages for different operations
class Messages:
    # Auth messages
    REGISTER_SUCCESS = "Registration successful"
    LOGIN_SUCCESSFUL = "Login successful"
    PROFILE_RETRIEVED = "Profile retrieved successfully"
    PROFILE_UPDATED = "Profile updated successfully"
    PASSWORD_CHANGED = "Password changed successfully"

    # Book messages
    BOOK_CREATED = "Book created successfully"
    BOOK_UPDATED = "Book updated successfully"
    BOOK_DELETED = "Book deleted successfully"
    BOOKS_RETRIEVED = "Books retrieved successfully"
    SEARCH_COMPLETED = "Search completed successfully"

    # Review messages
    REVIEW_CREATED = "Review created successfully"
    REVIEW_UPDATED = "Review updated successfully"
    REVIEW_DELETED = "Review deleted successfully"
    REVIEWS_RETRIEVED = "Reviews retrieved successfully"

    # Library messages
    LIBRARY_RETRIEVED = "Library retrieved successfully"
    LIBRARY_ITEM_ADDED = "Book added to library"
    LIBRARY_ITEM_REMOVED = "Book removed from library"
    LIBRARY_ITEM_EXISTS = "Book already in library"
    LIBRARY_ITEM_NOT_FOUND = "Book not found in library"

    # Bookmark messages
    BOOKMARKS_RETRIEVED = "Bookmarks retrieved successfully"
    BOOKMARK_CREATED = "Bookmark created"
    BOOKMARK_UPDATED = "Bookmark updated"
    BOOKMARK_REMOVED = "Bookmark removed"
    BOOKMARK_NOT_FOUND = "Bookmark not found"

    # Reading Progress messages
    READING_PROGRESS_RETRIEVED = "Reading progress retrieved successfully"
    READING_PROGRESS_CREATED = "Reading progress created successfully"
    READING_PROGRESS_UPDATED = "Reading progress updated successfully"

    # Recently read messages
    RECENTLY_READ_RETRIEVED = "Recently read books retrieved successfully"
    RECENTLY_READ_ADDED = "Book added to recently read"
    RECENTLY_READ_UPDATED = "Recently read timestamp refreshed"

    # Download messages
    DOWNLOADS_RETRIEVED = "Downloads retrieved successfully"
    DOWNLOAD_ADDED = "Download recorded"
    DOWNLOAD_EXISTS = "Book already downloaded"
    DOWNLOAD_REMOVED = "Download removed"
    DOWNLOAD_NOT_FOUND = "Download not found"

    # General messages
    DATA_RETRIEVED = "Data retrieved successfully"
    INVALID_REQUEST = "Invalid request data"
    INTERNAL_ERROR = "Internal server error occurred"
