from fastapi import APIRouter

from bookverse.api.v1.endpoints import auth, books, library, reviews

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(books.router, prefix="/books", tags=["books"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(library.router, prefix="/library", tags=["library"])
