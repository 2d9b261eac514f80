"""
Note Service.

Business logic for notes: ownership enforcement and the soft-delete
lifecycle. Every rule is checked before any write is attempted.

Lifecycle:
    active --soft_delete--> deleted --restore--> active

Reading active notes is open to any authenticated user; mutating a note
is restricted to its author.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notely.core.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
)
from notely.core.utils import utc_now
from notely.models.entry import Entry
from notely.repositories.entry import EntryRepository
from notely.schemas.note import NoteCreate, NoteUpdate
from notely.services.base import BaseService

TITLE_MIN, TITLE_MAX = 3, 100
SYNOPSIS_MIN, SYNOPSIS_MAX = 10, 200
CONTENT_MIN = 10


class NoteService(BaseService):
    """Service for note business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = EntryRepository(session)

    async def _get_existing(self, note_id: str) -> Entry:
        entry = await self._execute_db_operation(
            "get_note",
            self.repo.get_by_id_or_none(note_id),
        )
        if entry is None:
            raise NotFoundError("Note not found")
        return entry

    async def _get_active(self, note_id: str, message: str = "Note not found") -> Entry:
        entry = await self._get_existing(note_id)
        if entry.is_deleted:
            raise NotFoundError(message)
        return entry

    def _ensure_owner(self, entry: Entry, actor_id: str, action: str) -> None:
        if entry.author_id != actor_id:
            self._logger.warning(
                "Note ownership check failed",
                extra={"note_id": entry.id, "actor_id": actor_id, "action": action},
            )
            raise AuthorizationError(f"You do not have permission to {action} this note")

    async def list_notes(self, search: str | None = None) -> list[Entry]:
        """
        List active notes, newest first.

        Args:
            search: Optional case-insensitive filter over title, synopsis,
                content and author username
        """
        term = (search or "").strip() or None
        self._log_debug("Listing notes", search=term)
        return await self._execute_db_operation(
            "list_notes",
            self.repo.list_active(search=term),
        )

    async def get_note(self, note_id: str) -> Entry:
        """
        Get an active note by ID.

        Raises:
            NotFoundError: If the note is absent or soft-deleted
        """
        return await self._get_active(note_id)

    async def create_note(self, author_id: str, data: NoteCreate) -> Entry:
        """
        Create a note owned by author_id.

        Fields are checked in order title, synopsis, content; the first
        failure is reported.

        Raises:
            ValidationError: If a field is missing or out of bounds
        """
        title = self._require(data.title, "title", "Title is required")
        self._validate_string_length(
            title, "title", "Title must be between 3 and 100 characters",
            min_length=TITLE_MIN, max_length=TITLE_MAX,
        )
        synopsis = self._require(data.synopsis, "synopsis", "Synopsis is required")
        self._validate_string_length(
            synopsis, "synopsis", "Synopsis must be between 10 and 200 characters",
            min_length=SYNOPSIS_MIN, max_length=SYNOPSIS_MAX,
        )
        content = self._require(data.content, "content", "Content is required")
        self._validate_string_length(
            content, "content", "Content must be at least 10 characters long",
            min_length=CONTENT_MIN,
        )

        self._log_operation("Creating note", author_id=author_id)
        entry = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=title,
                synopsis=synopsis,
                content=content,
                author_id=author_id,
                is_deleted=False,
            ),
        )
        self._log_debug("Note created", note_id=entry.id)
        return entry

    async def update_note(self, note_id: str, actor_id: str, data: NoteUpdate) -> Entry:
        """
        Replace a note's title, synopsis and content.

        Only non-emptiness is checked here, unlike create_note.

        Raises:
            NotFoundError: If the note is absent or soft-deleted
            AuthorizationError: If actor_id is not the author
            ValidationError: If any field is empty after trimming
        """
        entry = await self._get_active(note_id, "Note not found or has been deleted")
        self._ensure_owner(entry, actor_id, "update")

        title = self._require(data.title, "title", "Title is required")
        synopsis = self._require(data.synopsis, "synopsis", "Synopsis is required")
        content = self._require(data.content, "content", "Content is required")

        self._log_operation("Updating note", note_id=note_id)
        return await self._execute_db_operation(
            "update_note",
            self.repo.update(
                entry,
                title=title,
                synopsis=synopsis,
                content=content,
                updated_at=utc_now(),
            ),
        )

    async def soft_delete_note(self, note_id: str, actor_id: str) -> None:
        """
        Move a note to its author's trash.

        Raises:
            NotFoundError: If the note is absent or already deleted
            AuthorizationError: If actor_id is not the author
        """
        entry = await self._get_active(note_id, "Note not found or has been deleted")
        self._ensure_owner(entry, actor_id, "delete")

        self._log_operation("Deleting note", note_id=note_id)
        await self._execute_db_operation(
            "soft_delete_note",
            self.repo.update(entry, is_deleted=True, updated_at=utc_now()),
        )

    async def list_trash(self, actor_id: str) -> list[Entry]:
        """List the actor's own soft-deleted notes, most recently deleted first."""
        return await self._execute_db_operation(
            "list_trash",
            self.repo.list_trash(actor_id),
        )

    async def restore_note(self, note_id: str, actor_id: str) -> Entry:
        """
        Bring a soft-deleted note back.

        Raises:
            NotFoundError: If the note is absent
            AuthorizationError: If actor_id is not the author
            InvalidStateError: If the note is not deleted
        """
        entry = await self._get_existing(note_id)
        self._ensure_owner(entry, actor_id, "restore")
        if not entry.is_deleted:
            raise InvalidStateError("Note is not deleted")

        self._log_operation("Restoring note", note_id=note_id)
        return await self._execute_db_operation(
            "restore_note",
            self.repo.update(entry, is_deleted=False, updated_at=utc_now()),
        )

    async def list_user_notes(self, author_id: str) -> list[Entry]:
        """List an author's active notes, newest first."""
        return await self._execute_db_operation(
            "list_user_notes",
            self.repo.list_active_by_author(author_id),
        )
