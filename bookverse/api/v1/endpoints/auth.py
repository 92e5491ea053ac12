from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookverse.core.auth import create_access_token, get_current_user, verify_password
from bookverse.core.database import get_db
from bookverse.core.exceptions import AuthenticationError, DuplicateEmail, InvalidCredentials
from bookverse.crud.user import crud_user
from bookverse.models.user import User
from bookverse.schemas.response import (
    CreateResponse,
    MessageResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)
from bookverse.schemas.user import (
    AuthResult,
    PasswordChangeRequest,
    UserCreate,
    UserLogin,
    UserProfile,
    UserResponse,
    UserUpdate,
)

router = APIRouter()


def _auth_result(user: User) -> AuthResult:
    return AuthResult(
        user=UserResponse.model_validate(user), token=create_access_token(user.id)
    )


@router.post(
    "/register",
    response_model=CreateResponse[AuthResult],
    status_code=status.HTTP_201_CREATED,
)
def register(
    *,
    db: Session = Depends(get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create a new account and sign it in.
    """
    if crud_user.get_by_email(db, email=user_in.email):
        raise DuplicateEmail()

    try:
        user = crud_user.create(db, obj_in=user_in)
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email
        db.rollback()
        raise DuplicateEmail()

    return CreateResponse(message=Messages.REGISTER_SUCCESS, data=_auth_result(user))


@router.post("/login", response_model=SuccessResponse[AuthResult])
def login(user_in: UserLogin, db: Session = Depends(get_db)) -> Any:
    user = crud_user.authenticate(db, email=user_in.email, password=user_in.password)
    if not user:
        raise InvalidCredentials()
    return SuccessResponse(message=Messages.LOGIN_SUCCESSFUL, data=_auth_result(user))


@router.get("/profile", response_model=SuccessResponse[UserProfile])
def read_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Current user plus counts of uploaded books, library items, bookmarks and reviews.
    """
    profile = UserProfile(
        **UserResponse.model_validate(current_user).model_dump(),
        counts=crud_user.get_counts(db, user_id=current_user.id),
    )
    return SuccessResponse(message=Messages.PROFILE_RETRIEVED, data=profile)


@router.put("/profile", response_model=UpdateResponse[UserResponse])
def update_profile(
    *,
    db: Session = Depends(get_db),
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    user = crud_user.update(db, db_obj=current_user, obj_in=user_in)
    return UpdateResponse(
        message=Messages.PROFILE_UPDATED, data=UserResponse.model_validate(user)
    )


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    *,
    db: Session = Depends(get_db),
    password_in: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
) -> Any:
    if not verify_password(password_in.current_password, current_user.hashed_password):
        raise AuthenticationError("Current password is incorrect")

    crud_user.change_password(
        db, user=current_user, new_password=password_in.new_password
    )
    return MessageResponse(message=Messages.PASSWORD_CHANGED)
