import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from bookverse.core.config import settings
from bookverse.core.exceptions import InvalidToken, TokenExpired

logger = logging.getLogger(__name__)


class TokenService:
    """Service for issuing and verifying bearer access tokens."""

    def __init__(self):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_access_token(
        self, user_id: int, expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create an access token carrying the user id and an expiry."""
        expire = datetime.utcnow() + (
            expires_delta or timedelta(minutes=self.expire_minutes)
        )

        to_encode = {
            "user_id": user_id,
            "exp": expire,
            "type": "access",
            "iat": datetime.utcnow(),
        }

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> int:
        """Return the user id carried by the token.

        Raises TokenExpired for an expired signature and InvalidToken for any
        other decoding failure or a malformed payload.
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired access token")
            raise TokenExpired()
        except JWTError as e:
            logger.warning(f"JWT error while verifying token: {str(e)}")
            raise InvalidToken()

        user_id = payload.get("user_id")
        if not isinstance(user_id, int) or payload.get("type") != "access":
            logger.warning("Invalid token payload")
            raise InvalidToken()

        return user_id


# Create a singleton instance
token_service = TokenService()
