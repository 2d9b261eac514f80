"""
User Model.

Identity record. The password hash never leaves the persistence and
service layers.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notely.core.utils import utc_now
from notely.models.base import Base, UUIDMixin

if TYPE_CHECKING:
    from notely.models.entry import Entry


class User(UUIDMixin, Base):
    """User account with profile fields."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        Text,
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        Text,
        unique=True,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    first_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_joined: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )
    last_profile_update: Mapped[datetime] = mapped_column(
        DateTime,
        default=utc_now,
        nullable=False,
    )

    entries: Mapped[list["Entry"]] = relationship(back_populates="author", lazy="noload")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
