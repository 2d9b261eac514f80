"""
Security Utilities.

Credential hashing (bcrypt) and bearer token issue/verification (JWT).
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notely.core.exceptions import AuthenticationError, HashingError
from notely.core.logging import get_logger
from notely.core.utils import utc_now

logger = get_logger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of the input
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """
    Hash a password using bcrypt.

    Raises:
        HashingError: If the bcrypt primitive fails
    """
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        logger.error("Password hashing failed", extra={"error": str(e)})
        raise HashingError() from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    A mismatch returns False. A malformed stored hash raises HashingError.
    """
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password),
            hashed_password.encode("utf-8"),
        )
    except (ValueError, TypeError) as e:
        logger.error("Stored password hash is malformed", extra={"error": str(e)})
        raise HashingError("Stored password hash is invalid") from e


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.

    Raises:
        AuthenticationError: If the header is absent or not a bearer credential
    """
    if not authorization:
        raise AuthenticationError("No token provided")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("No token provided")
    return token


class TokenService:
    """
    Issues and verifies signed access tokens carrying a user id.

    Constructed explicitly from configuration and passed to request
    handlers through a dependency.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_days: int = 7,
        audience: str | None = None,
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret is not configured")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_days = expire_days
        self.audience = audience

    @classmethod
    def from_config(cls, settings: Any, app_config: Any) -> "TokenService":
        jwt_config = app_config.security.jwt
        return cls(
            secret=settings.jwt_secret,
            algorithm=jwt_config.algorithm,
            expire_days=jwt_config.token_expire_days,
            audience=jwt_config.audience,
        )

    def issue(self, user_id: str, expires_delta: timedelta | None = None) -> str:
        """
        Create a signed access token for a user.

        Args:
            user_id: Identifier stored in the ``sub`` claim
            expires_delta: Optional custom lifetime (defaults to expire_days)

        Returns:
            Encoded JWT
        """
        lifetime = expires_delta if expires_delta is not None else timedelta(days=self.expire_days)
        claims: dict[str, Any] = {
            "sub": str(user_id),
            "exp": utc_now() + lifetime,
            "type": "access",
        }
        if self.audience:
            claims["aud"] = self.audience
        return jwt.encode(claims, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Verify a token's signature and expiry and return its user id.

        Raises:
            AuthenticationError: For any expired, malformed or mis-signed token
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=self.audience,
            )
        except JWTError as e:
            logger.warning("Token decode failed", extra={"error": str(e)})
            raise AuthenticationError("Invalid or expired token") from e

        user_id = payload.get("sub")
        if payload.get("type") != "access" or not user_id:
            logger.warning("Token is missing required claims")
            raise AuthenticationError("Invalid or expired token")
        return str(user_id)
