from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    name: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def password_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserUpdate(BaseModel):
    name: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator("name", "avatar_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # Blank values leave the stored field untouched
        if v is not None and not v.strip():
            return None
        return v


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    @classmethod
    def current_password_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def new_password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("New password must be at least 6 characters")
        return v


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    avatar_url: Optional[str] = None


class UserResponse(UserSummary):
    email: str
    created_at: Optional[datetime] = None


class UserCounts(BaseModel):
    uploaded_books: int = 0
    library: int = 0
    bookmarks: int = 0
    reviews: int = 0


class UserProfile(UserResponse):
    counts: UserCounts


class AuthResult(BaseModel):
    user: UserResponse
    token: str
