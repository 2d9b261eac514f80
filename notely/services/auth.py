"""
Auth Service.

Registration and login. Both return the user together with a fresh
access token.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notely.core.exceptions import AuthenticationError, ConflictError, ValidationError
from notely.core.security import DEFAULT_BCRYPT_ROUNDS, TokenService, hash_password, verify_password
from notely.core.utils import clean
from notely.models.user import User
from notely.repositories.user import UserRepository
from notely.schemas.auth import LoginRequest, RegisterRequest
from notely.services.base import BaseService


class AuthService(BaseService):
    """Service for account creation and credential checks."""

    def __init__(
        self,
        session: AsyncSession,
        tokens: TokenService,
        password_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.tokens = tokens
        self.password_rounds = password_rounds

    async def register(self, data: RegisterRequest) -> tuple[User, str]:
        """
        Create a user account.

        Raises:
            ValidationError: If a required field is missing
            ConflictError: If the email or username is taken (email checked first)
        """
        username = clean(data.username)
        email = clean(data.email)
        if not username or not email or not clean(data.password):
            raise ValidationError("Username, email, and password are required")

        first_name = clean(data.first_name)
        last_name = clean(data.last_name)
        if not first_name or not last_name:
            raise ValidationError("First name and last name are required")

        if await self._execute_db_operation("find_user_by_email", self.users.get_by_email(email)):
            raise ConflictError("Email already registered", field="email")
        if await self._execute_db_operation("find_user_by_username", self.users.get_by_username(username)):
            raise ConflictError("Username already taken", field="username")

        hashed = hash_password(data.password, rounds=self.password_rounds)

        self._log_operation("Registering user", username=username)
        user = await self._execute_db_operation(
            "create_user",
            self.users.create(
                username=username,
                email=email,
                hashed_password=hashed,
                first_name=first_name,
                last_name=last_name,
            ),
        )
        return user, self.tokens.issue(user.id)

    async def login(self, data: LoginRequest) -> tuple[User, str]:
        """
        Check credentials given either an email or a username.

        Raises:
            ValidationError: If either field is missing
            AuthenticationError: If no user matches or the password is wrong
        """
        identifier = clean(data.email_or_username)
        if not identifier or not data.password:
            raise ValidationError("Email/Username and password are required")

        user = await self._execute_db_operation(
            "find_user_by_login",
            self.users.get_by_login(identifier),
        )
        if user is None or not verify_password(data.password, user.hashed_password):
            self._logger.warning("Login failed", extra={"identifier_found": user is not None})
            raise AuthenticationError("Invalid credentials")

        self._log_operation("User logged in", user_id=user.id)
        return user, self.tokens.issue(user.id)
