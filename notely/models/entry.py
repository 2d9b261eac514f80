"""
Entry Model.

A note. "Note" is the API name, "entry" the storage name.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notely.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from notely.models.user import User


class Entry(UUIDMixin, TimestampMixin, Base):
    """
    Entry database model.

    Soft-deleted rows keep is_deleted=True and are only visible through
    the owner's trash listing.
    """

    __tablename__ = "entries"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    synopsis: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    is_deleted: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
        index=True,
    )

    author: Mapped["User"] = relationship(back_populates="entries", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Entry(id={self.id}, title={self.title!r}, deleted={self.is_deleted})>"
