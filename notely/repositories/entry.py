"""
Entry Repository.

Data access layer for notes. Listing queries always filter on the
soft-delete flag; nothing here removes rows.
"""

from typing import Any

from sqlalchemy import or_, select

from notely.models.entry import Entry
from notely.models.user import User
from notely.repositories.base import BaseRepository


class EntryRepository(BaseRepository[Entry]):
    """
    Repository for Entry model.

    Every returned entry has its author relationship loaded.
    """

    model = Entry

    async def create(self, **kwargs: Any) -> Entry:
        instance = await super().create(**kwargs)
        await self.session.refresh(instance, attribute_names=["author"])
        return instance

    async def update(self, instance: Entry, **kwargs: Any) -> Entry:
        instance = await super().update(instance, **kwargs)
        await self.session.refresh(instance, attribute_names=["author"])
        return instance

    async def list_active(self, search: str | None = None) -> list[Entry]:
        """
        Get all non-deleted entries, newest first.

        Args:
            search: Optional case-insensitive substring matched against
                title, synopsis, content and author username. LIKE
                wildcards in the term are matched literally.
        """
        stmt = (
            select(Entry)
            .join(Entry.author)
            .where(Entry.is_deleted == False)  # noqa: E712
        )
        if search:
            stmt = stmt.where(
                or_(
                    Entry.title.icontains(search, autoescape=True),
                    Entry.synopsis.icontains(search, autoescape=True),
                    Entry.content.icontains(search, autoescape=True),
                    User.username.icontains(search, autoescape=True),
                )
            )
        result = await self.session.execute(stmt.order_by(Entry.created_at.desc()))
        return list(result.scalars().all())

    async def list_active_by_author(self, author_id: str) -> list[Entry]:
        """Get an author's non-deleted entries, newest first."""
        result = await self.session.execute(
            select(Entry)
            .where(Entry.author_id == author_id)
            .where(Entry.is_deleted == False)  # noqa: E712
            .order_by(Entry.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_trash(self, author_id: str) -> list[Entry]:
        """Get an author's soft-deleted entries, most recently changed first."""
        result = await self.session.execute(
            select(Entry)
            .where(Entry.author_id == author_id)
            .where(Entry.is_deleted == True)  # noqa: E712
            .order_by(Entry.updated_at.desc())
        )
        return list(result.scalars().all())
