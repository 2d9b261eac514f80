"""
Notes API Endpoints.

REST API endpoints for notes. Mounted at both /api/notes and
/api/entries. Every route requires a bearer token.
"""

from fastapi import APIRouter, Query

from notely.core.dependencies import CurrentUser, DbSession
from notely.schemas.base import MessageResponse
from notely.schemas.note import (
    NoteCreate,
    NoteEnvelope,
    NoteListEnvelope,
    NoteResponse,
    NoteUpdate,
)
from notely.services.note import NoteService

router = APIRouter()


def _many(message: str, entries: list) -> NoteListEnvelope:
    return NoteListEnvelope(
        message=message,
        notes=[NoteResponse.model_validate(e) for e in entries],
    )


@router.get(
    "",
    response_model=NoteListEnvelope,
    summary="List notes",
    description="List all active notes, newest first, optionally filtered by a search term.",
)
async def list_notes(
    db: DbSession,
    user: CurrentUser,
    search: str | None = Query(
        default=None,
        description="Case-insensitive match on title, synopsis, content or author username",
    ),
) -> NoteListEnvelope:
    entries = await NoteService(db).list_notes(search=search)
    return _many("Notes retrieved successfully", entries)


@router.get(
    "/trash",
    response_model=NoteListEnvelope,
    summary="List deleted notes",
    description="List the caller's soft-deleted notes, most recently deleted first.",
)
async def list_trash(db: DbSession, user: CurrentUser) -> NoteListEnvelope:
    entries = await NoteService(db).list_trash(user.id)
    return _many("Deleted notes retrieved successfully", entries)


@router.get(
    "/{note_id}",
    response_model=NoteEnvelope,
    summary="Get a note",
)
async def get_note(note_id: str, db: DbSession, user: CurrentUser) -> NoteEnvelope:
    entry = await NoteService(db).get_note(note_id)
    return NoteEnvelope(message="Note retrieved successfully", note=NoteResponse.model_validate(entry))


@router.post(
    "",
    response_model=NoteEnvelope,
    status_code=201,
    summary="Create a note",
    description="Create a note owned by the caller.",
)
async def create_note(data: NoteCreate, db: DbSession, user: CurrentUser) -> NoteEnvelope:
    entry = await NoteService(db).create_note(user.id, data)
    return NoteEnvelope(message="Note created successfully", note=NoteResponse.model_validate(entry))


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=NoteEnvelope,
    summary="Update a note",
    description="Replace title, synopsis and content of one of the caller's notes.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user: CurrentUser,
) -> NoteEnvelope:
    entry = await NoteService(db).update_note(note_id, user.id, data)
    return NoteEnvelope(message="Note updated successfully", note=NoteResponse.model_validate(entry))


@router.patch(
    "/restore/{note_id}",
    response_model=NoteEnvelope,
    summary="Restore a deleted note",
)
async def restore_note(note_id: str, db: DbSession, user: CurrentUser) -> NoteEnvelope:
    entry = await NoteService(db).restore_note(note_id, user.id)
    return NoteEnvelope(message="Note restored successfully", note=NoteResponse.model_validate(entry))


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    summary="Delete a note",
    description="Move one of the caller's notes to the trash.",
)
async def delete_note(note_id: str, db: DbSession, user: CurrentUser) -> MessageResponse:
    await NoteService(db).soft_delete_note(note_id, user.id)
    return MessageResponse(message="Note deleted successfully")
