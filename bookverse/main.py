import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookverse.api.v1.router import api_router
from bookverse.core.config import settings
from bookverse.core.database import create_tables, get_db
from bookverse.core.exceptions import BadRequestError
from bookverse.core.logging import setup_logging
from bookverse.schemas.response import ErrorResponse, Messages
from bookverse.services.storage_service import storage_service

# Setup logging before creating the app
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.PROJECT_NAME} starting up ({settings.ENVIRONMENT})")

    if settings.AUTO_CREATE_TABLES:
        create_tables()

    yield

    logger.info(f"{settings.PROJECT_NAME} shutting down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(
    status_code: int, message: str, headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


def first_error_message(errors: list) -> str:
    """Human-readable message for the first validation failure."""
    if not errors:
        return Messages.INVALID_REQUEST

    error = errors[0]
    names = [
        str(part)
        for part in error.get("loc", ())
        if part not in ("body", "query", "path", "header", "form")
    ]
    field = names[-1] if names else None
    message = error.get("msg", Messages.INVALID_REQUEST)

    if error.get("type") == "missing" and field:
        return f"{field} is required"
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    return f"{field}: {message}" if field else message


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = first_error_message(exc.errors())
    logger.info(f"400 Validation Error on {request.method} {request.url.path}: {message}")
    return _error(BadRequestError().status_code, message)


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    message = first_error_message(exc.errors())
    logger.info(f"400 Validation Error on {request.method} {request.url.path}: {message}")
    return _error(BadRequestError().status_code, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, Messages.INTERNAL_ERROR)


# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


# Health check endpoint
@app.get(f"{settings.API_PREFIX}/health")
def health_check(db: Session = Depends(get_db)) -> Any:
    """Health check endpoint for monitoring and load balancers"""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {str(e)}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "message": f"{settings.PROJECT_NAME} database unavailable",
                "database": "disconnected",
            },
        )

    return {
        "status": "ok",
        "message": "BookVerse API is running",
        "database": "connected",
    }


# Uploaded cover images
storage_service.ensure_folder()
app.mount(
    settings.UPLOAD_URL_PATH,
    StaticFiles(directory=settings.UPLOAD_FOLDER),
    name="uploads",
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
