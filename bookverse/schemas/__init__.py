from .book import (
    BookCreate,
    BookDetail,
    BookPage,
    BookResponse,
    BookSummary,
    BookUpdate,
    ChapterIn,
    ChapterResponse,
    SubchapterIn,
    SubchapterResponse,
)
from .library import (
    BookmarkResponse,
    BookmarkUpsert,
    DownloadCreate,
    DownloadResponse,
    LibraryItemCreate,
    LibraryItemResponse,
    ReadingProgressResponse,
    ReadingProgressUpsert,
    RecentlyReadCreate,
    RecentlyReadResponse,
)
from .response import (
    APIResponse,
    CreateResponse,
    ErrorResponse,
    ListResponse,
    MessageResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)
from .review import (
    RatingSummary,
    ReviewCreate,
    ReviewPage,
    ReviewResponse,
    ReviewUpdate,
    ReviewWithBook,
)
from .user import (
    AuthResult,
    PasswordChangeRequest,
    UserCounts,
    UserCreate,
    UserLogin,
    UserProfile,
    UserResponse,
    UserSummary,
    UserUpdate,
)
