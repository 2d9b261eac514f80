"""
Profile Service.

Profile reads, partial updates, avatar replacement and password changes.
Every successful mutation refreshes last_profile_update.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from notely.core.exceptions import (
    ConflictError,
    ExternalServiceError,
    IncorrectPasswordError,
    NotFoundError,
    ValidationError,
)
from notely.core.security import DEFAULT_BCRYPT_ROUNDS, hash_password, verify_password
from notely.core.utils import clean, utc_now
from notely.models.user import User
from notely.repositories.user import UserRepository
from notely.schemas.user import PasswordUpdate, ProfileUpdate
from notely.services.base import BaseService
from notely.services.media import MediaService

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
NAME_MIN_LENGTH = 2

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


class ProfileService(BaseService):
    """Service for the authenticated user's own profile."""

    def __init__(
        self,
        session: AsyncSession,
        media: MediaService | None = None,
        password_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_mime_prefix: str = "image/",
    ) -> None:
        super().__init__(session)
        self.users = UserRepository(session)
        self.media = media
        self.password_rounds = password_rounds
        self.max_upload_bytes = max_upload_bytes
        self.allowed_mime_prefix = allowed_mime_prefix

    async def get_profile(self, user_id: str) -> User:
        """
        Raises:
            NotFoundError: If the user no longer exists
        """
        user = await self._execute_db_operation(
            "get_profile",
            self.users.get_by_id_or_none(user_id),
        )
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _validate_name(self, value: str, label: str, field_name: str) -> str:
        name = clean(value)
        if len(name) < NAME_MIN_LENGTH:
            raise ValidationError(f"{label} must be at least 2 characters long", field=field_name)
        if not NAME_PATTERN.match(name):
            raise ValidationError(f"{label} can only contain letters and spaces", field=field_name)
        return name

    async def update_profile(self, user_id: str, data: ProfileUpdate) -> User:
        """
        Apply a partial profile update.

        Only fields present in the request are touched. An empty avatar
        clears it. When both email and username collide, the email
        conflict is reported.

        Raises:
            ValidationError: If a supplied name is too short or has invalid characters
            ConflictError: If the email or username belongs to another user
        """
        supplied = data.model_fields_set
        changes: dict[str, object] = {}

        if "first_name" in supplied and data.first_name is not None:
            changes["first_name"] = self._validate_name(data.first_name, "First name", "first_name")
        if "last_name" in supplied and data.last_name is not None:
            changes["last_name"] = self._validate_name(data.last_name, "Last name", "last_name")

        if "email" in supplied and data.email is not None:
            changes["email"] = self._require(data.email, "email", "Email cannot be empty")
        if "username" in supplied and data.username is not None:
            changes["username"] = self._require(data.username, "username", "Username cannot be empty")

        if "avatar" in supplied:
            changes["avatar"] = clean(data.avatar) or None

        user = await self.get_profile(user_id)

        if "email" in changes:
            taken = await self._execute_db_operation(
                "find_other_by_email",
                self.users.find_other_by_email(changes["email"], exclude_id=user_id),
            )
            if taken:
                raise ConflictError("Email already exists", field="email")
        if "username" in changes:
            taken = await self._execute_db_operation(
                "find_other_by_username",
                self.users.find_other_by_username(changes["username"], exclude_id=user_id),
            )
            if taken:
                raise ConflictError("Username already exists", field="username")

        changes["last_profile_update"] = utc_now()

        self._log_operation("Updating profile", user_id=user_id, fields=sorted(changes))
        return await self._execute_db_operation(
            "update_profile",
            self.users.update(user, **changes),
        )

    async def upload_avatar(
        self,
        user_id: str,
        content: bytes | None,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> User:
        """
        Store a new avatar image and point the profile at it.

        The new URL is committed before the previous image is deleted, so a
        failed commit never points the profile at a removed asset. The
        deletion is best-effort; a failure is logged and leaves the new
        avatar in place.

        Raises:
            ValidationError: If no file is given, it is not an image, or it is too large
            ExternalServiceError: If the upload itself fails
        """
        if not content:
            raise ValidationError("No image file provided", field="avatar")
        if not (content_type or "").startswith(self.allowed_mime_prefix):
            raise ValidationError("Only image files are allowed", field="avatar")
        if len(content) > self.max_upload_bytes:
            raise ValidationError("Image must be 5MB or smaller", field="avatar")
        if self.media is None:
            raise ExternalServiceError("Media service is not configured")

        user = await self.get_profile(user_id)
        previous_avatar = user.avatar

        avatar_url = await self.media.upload_image(
            content,
            filename=filename or "avatar",
            content_type=content_type or "application/octet-stream",
        )

        self._log_operation("Avatar uploaded", user_id=user_id)
        user = await self._execute_db_operation(
            "update_avatar",
            self.users.update(user, avatar=avatar_url, last_profile_update=utc_now()),
        )

        if previous_avatar and previous_avatar != avatar_url:
            # The old asset is only removed once the new URL is durable
            await self._execute_db_operation("commit_avatar", self.session.commit())
            await self._delete_previous_avatar(previous_avatar)

        return user

    async def _delete_previous_avatar(self, url: str) -> None:
        public_id = self.media.public_id_from_url(url)
        if not public_id:
            return
        try:
            await self.media.delete_image(public_id)
        except ExternalServiceError as e:
            self._logger.warning(
                "Failed to delete previous avatar",
                extra={"public_id": public_id, "error": e.message},
            )

    async def update_password(self, user_id: str, data: PasswordUpdate) -> None:
        """
        Change the password after checking the current one.

        Raises:
            ValidationError: If either password is missing
            IncorrectPasswordError: If the current password does not match
        """
        if not data.current_password or not data.new_password:
            raise ValidationError("Current password and new password are required")

        user = await self.get_profile(user_id)
        if not verify_password(data.current_password, user.hashed_password):
            self._logger.warning("Password change rejected", extra={"user_id": user_id})
            raise IncorrectPasswordError()

        hashed = hash_password(data.new_password, rounds=self.password_rounds)
        self._log_operation("Updating password", user_id=user_id)
        await self._execute_db_operation(
            "update_password",
            self.users.update(user, hashed_password=hashed, last_profile_update=utc_now()),
        )
