"""
FastAPI Dependencies.

Shared dependencies for request handling: database session,
configured collaborators (token service, media service) and the bearer
token authentication gate.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

import structlog
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from notely.core.config import get_app_config, get_settings
from notely.core.database import get_db_session
from notely.core.exceptions import AuthenticationError
from notely.core.logging import get_logger
from notely.core.security import TokenService, extract_bearer_token
from notely.repositories.user import UserRepository
from notely.services.media import MediaService

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


@lru_cache
def get_token_service() -> TokenService:
    """Token service built once from settings and security.yaml."""
    return TokenService.from_config(get_settings(), get_app_config())


@lru_cache
def get_media_service() -> MediaService:
    """Media client built once from settings and media.yaml."""
    return MediaService.from_config(get_settings(), get_app_config())


def get_password_rounds() -> int:
    return get_app_config().security.passwords.bcrypt_rounds


Tokens = Annotated[TokenService, Depends(get_token_service)]
Media = Annotated[MediaService, Depends(get_media_service)]
PasswordRounds = Annotated[int, Depends(get_password_rounds)]


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from a bearer token. Never carries the password hash."""

    id: str
    username: str
    email: str
    first_name: str | None
    last_name: str | None


async def get_current_user(
    db: DbSession,
    tokens: Tokens,
    authorization: str | None = Header(None),
) -> AuthenticatedUser:
    """
    Resolve the bearer token in the Authorization header to a user.

    One token verification and one user lookup per request.

    Raises:
        AuthenticationError: If the header is missing or malformed, the
            token does not verify, or the user no longer exists
    """
    token = extract_bearer_token(authorization)
    user_id = tokens.verify(token)

    user = await UserRepository(db).get_by_id_or_none(user_id)
    if user is None:
        logger.warning("Token refers to a missing user", extra={"user_id": user_id})
        raise AuthenticationError("Invalid token")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return AuthenticatedUser(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
