from datetime import timedelta
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from bookverse.core.database import get_db
from bookverse.core.exceptions import AuthenticationError, UserNotFound
from bookverse.models.user import User
from bookverse.services.token_service import token_service

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# auto_error is off so a missing header yields our 401 instead of Starlette's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return token_service.create_access_token(user_id, expires_delta=expires_delta)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token on the request to a stored user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    user_id = token_service.verify_access_token(credentials.credentials)

    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound()
    return user
