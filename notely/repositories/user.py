"""
User Repository.

Data access layer for users, including the uniqueness lookups used by
registration and profile updates.
"""

from sqlalchemy import or_, select

from notely.models.user import User
from notely.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_login(self, email_or_username: str) -> User | None:
        """Find the user whose email or username equals the given value."""
        result = await self.session.execute(
            select(User)
            .where(or_(User.email == email_or_username, User.username == email_or_username))
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_other_by_email(self, email: str, exclude_id: str) -> User | None:
        """Find a different user already holding this email."""
        result = await self.session.execute(
            select(User).where(User.email == email, User.id != exclude_id)
        )
        return result.scalar_one_or_none()

    async def find_other_by_username(self, username: str, exclude_id: str) -> User | None:
        """Find a different user already holding this username."""
        result = await self.session.execute(
            select(User).where(User.username == username, User.id != exclude_id)
        )
        return result.scalar_one_or_none()
