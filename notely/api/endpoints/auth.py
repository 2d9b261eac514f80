"""
Auth API Endpoints.

Registration, login and logout. None of these require a token.
"""

from fastapi import APIRouter

from notely.core.dependencies import DbSession, PasswordRounds, Tokens
from notely.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from notely.schemas.base import MessageResponse
from notely.schemas.user import UserResponse
from notely.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    summary="Register",
    description="Create an account and return it with an access token.",
)
async def register(
    data: RegisterRequest,
    db: DbSession,
    tokens: Tokens,
    rounds: PasswordRounds,
) -> AuthResponse:
    user, token = await AuthService(db, tokens, rounds).register(data)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="Exchange an email or username and password for an access token.",
)
async def login(
    data: LoginRequest,
    db: DbSession,
    tokens: Tokens,
    rounds: PasswordRounds,
) -> AuthResponse:
    user, token = await AuthService(db, tokens, rounds).login(data)
    return AuthResponse(user=UserResponse.model_validate(user), token=token)


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Log out",
    description="Tokens are stateless; the client discards its copy.",
)
async def logout() -> MessageResponse:
    return MessageResponse(message="Logged out (token cleared on client)")
