"""
Unit Tests for Note Service.

Tests the NoteService business logic with a mocked repository.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from notely.core.exceptions import (
    AuthorizationError,
    DatabaseError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from notely.schemas.note import NoteCreate, NoteUpdate
from notely.services.note import NoteService

VALID = {
    "title": "Trip Log",
    "synopsis": "Notes from a weekend trip to the coast",
    "content": "Day one was sunny and long.",
}


@pytest.fixture
def service(mock_db_session) -> NoteService:
    return NoteService(mock_db_session)


# =============================================================================
# Create
# =============================================================================


class TestCreateNote:

    async def test_creates_trimmed_active_note(self, service, entry_factory):
        with patch.object(service.repo, "create", return_value=entry_factory()) as mock_create:
            data = NoteCreate(title="  Trip Log  ", synopsis=VALID["synopsis"], content=VALID["content"])
            result = await service.create_note("user-1", data)

        mock_create.assert_awaited_once_with(
            title="Trip Log",
            synopsis=VALID["synopsis"],
            content=VALID["content"],
            author_id="user-1",
            is_deleted=False,
        )
        assert result.is_deleted is False

    async def test_title_of_two_chars_rejected(self, service):
        with patch.object(service.repo, "create") as mock_create:
            with pytest.raises(ValidationError) as exc_info:
                await service.create_note("user-1", NoteCreate(**{**VALID, "title": "ab"}))
        assert exc_info.value.field == "title"
        mock_create.assert_not_called()

    async def test_title_of_three_chars_accepted(self, service, entry_factory):
        with patch.object(service.repo, "create", return_value=entry_factory(title="abc")):
            result = await service.create_note("user-1", NoteCreate(**{**VALID, "title": "abc"}))
        assert result.title == "abc"

    async def test_title_length_counted_after_trim(self, service):
        with pytest.raises(ValidationError):
            await service.create_note("user-1", NoteCreate(**{**VALID, "title": "  ab   "}))

    async def test_title_over_100_rejected(self, service):
        with pytest.raises(ValidationError, match="between 3 and 100"):
            await service.create_note("user-1", NoteCreate(**{**VALID, "title": "t" * 101}))

    async def test_synopsis_bounds(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.create_note("user-1", NoteCreate(**{**VALID, "synopsis": "too short"}))
        assert exc_info.value.field == "synopsis"

        with pytest.raises(ValidationError):
            await service.create_note("user-1", NoteCreate(**{**VALID, "synopsis": "s" * 201}))

    async def test_content_minimum(self, service):
        with pytest.raises(ValidationError, match="at least 10") as exc_info:
            await service.create_note("user-1", NoteCreate(**{**VALID, "content": "short"}))
        assert exc_info.value.field == "content"

    async def test_first_failing_field_reported(self, service):
        """All three invalid: title is reported."""
        with pytest.raises(ValidationError) as exc_info:
            await service.create_note("user-1", NoteCreate(title="a", synopsis="b", content="c"))
        assert exc_info.value.field == "title"

        with pytest.raises(ValidationError) as exc_info:
            await service.create_note("user-1", NoteCreate(title=VALID["title"], synopsis="b", content="c"))
        assert exc_info.value.field == "synopsis"

    async def test_missing_field_is_required_error(self, service):
        with pytest.raises(ValidationError, match="Synopsis is required"):
            await service.create_note("user-1", NoteCreate(title=VALID["title"], content=VALID["content"]))

    async def test_database_failure_becomes_database_error(self, service):
        with patch.object(service.repo, "create", side_effect=OperationalError("insert", {}, Exception("down"))):
            with pytest.raises(DatabaseError):
                await service.create_note("user-1", NoteCreate(**VALID))


# =============================================================================
# Read
# =============================================================================


class TestGetNote:

    async def test_returns_active_note(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()):
            result = await service.get_note("note-1")
        assert result.id == "note-1"

    async def test_absent_note_not_found(self, service):
        with patch.object(service.repo, "get_by_id_or_none", return_value=None):
            with pytest.raises(NotFoundError):
                await service.get_note("missing")

    async def test_deleted_note_not_found(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory(is_deleted=True)):
            with pytest.raises(NotFoundError):
                await service.get_note("note-1")


class TestListNotes:

    async def test_blank_search_means_no_filter(self, service):
        with patch.object(service.repo, "list_active", return_value=[]) as mock_list:
            await service.list_notes("   ")
        mock_list.assert_awaited_once_with(search=None)

    async def test_search_term_trimmed(self, service):
        with patch.object(service.repo, "list_active", return_value=[]) as mock_list:
            await service.list_notes(" coast ")
        mock_list.assert_awaited_once_with(search="coast")


# =============================================================================
# Update
# =============================================================================


class TestUpdateNote:

    async def test_owner_replaces_all_fields(self, service, entry_factory):
        entry = entry_factory()
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry),
            patch.object(service.repo, "update", return_value=entry) as mock_update,
        ):
            await service.update_note("note-1", "user-1", NoteUpdate(title=" New ", synopsis="S", content="C"))

        kwargs = mock_update.await_args.kwargs
        assert kwargs["title"] == "New"
        assert kwargs["synopsis"] == "S"
        assert kwargs["content"] == "C"
        assert "updated_at" in kwargs

    async def test_update_skips_length_bounds(self, service, entry_factory):
        """Only non-emptiness is enforced on update."""
        entry = entry_factory()
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry),
            patch.object(service.repo, "update", return_value=entry),
        ):
            await service.update_note("note-1", "user-1", NoteUpdate(title="a", synopsis="b", content="c"))

    async def test_empty_field_rejected(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()):
            with pytest.raises(ValidationError, match="Content is required"):
                await service.update_note("note-1", "user-1", NoteUpdate(title="a", synopsis="b", content="  "))

    async def test_non_author_forbidden_even_with_invalid_fields(self, service, entry_factory):
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()),
            patch.object(service.repo, "update") as mock_update,
        ):
            with pytest.raises(AuthorizationError):
                await service.update_note("note-1", "intruder", NoteUpdate())
        mock_update.assert_not_called()

    async def test_deleted_note_not_found(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory(is_deleted=True)):
            with pytest.raises(NotFoundError):
                await service.update_note("note-1", "user-1", NoteUpdate(**VALID))


# =============================================================================
# Soft delete / restore
# =============================================================================


class TestSoftDelete:

    async def test_owner_marks_deleted(self, service, entry_factory):
        entry = entry_factory()
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry),
            patch.object(service.repo, "update", return_value=entry) as mock_update,
        ):
            await service.soft_delete_note("note-1", "user-1")

        assert mock_update.await_args.kwargs["is_deleted"] is True
        assert "updated_at" in mock_update.await_args.kwargs

    async def test_non_author_forbidden(self, service, entry_factory):
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()),
            patch.object(service.repo, "update") as mock_update,
        ):
            with pytest.raises(AuthorizationError):
                await service.soft_delete_note("note-1", "intruder")
        mock_update.assert_not_called()

    async def test_already_deleted_not_found(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory(is_deleted=True)):
            with pytest.raises(NotFoundError):
                await service.soft_delete_note("note-1", "user-1")


class TestRestore:

    async def test_owner_restores(self, service, entry_factory):
        entry = entry_factory(is_deleted=True)
        with (
            patch.object(service.repo, "get_by_id_or_none", return_value=entry),
            patch.object(service.repo, "update", return_value=entry_factory()) as mock_update,
        ):
            result = await service.restore_note("note-1", "user-1")

        assert mock_update.await_args.kwargs["is_deleted"] is False
        assert result.is_deleted is False

    async def test_not_deleted_is_invalid_state(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()):
            with pytest.raises(InvalidStateError, match="Note is not deleted"):
                await service.restore_note("note-1", "user-1")

    async def test_ownership_checked_before_state(self, service, entry_factory):
        with patch.object(service.repo, "get_by_id_or_none", return_value=entry_factory()):
            with pytest.raises(AuthorizationError):
                await service.restore_note("note-1", "intruder")

    async def test_absent_not_found(self, service):
        with patch.object(service.repo, "get_by_id_or_none", return_value=None):
            with pytest.raises(NotFoundError):
                await service.restore_note("missing", "user-1")


class TestListings:

    async def test_trash_scoped_to_actor(self, service):
        with patch.object(service.repo, "list_trash", return_value=[]) as mock_trash:
            await service.list_trash("user-1")
        mock_trash.assert_awaited_once_with("user-1")

    async def test_user_notes_scoped_to_author(self, service):
        with patch.object(service.repo, "list_active_by_author", return_value=[]) as mock_list:
            await service.list_user_notes("user-1")
        mock_list.assert_awaited_once_with("user-1")
