"""
Note Schemas.

Pydantic schemas for note API request/response validation. Length rules
are enforced by NoteService so the error names the failing field.
"""

from datetime import datetime

from pydantic import Field

from notely.schemas.base import CamelModel
from notely.schemas.user import AuthorSummary


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    title: str | None = Field(
        default=None,
        description="Note title, 3-100 characters",
        examples=["Trip Log"],
    )
    synopsis: str | None = Field(
        default=None,
        description="Short summary, 10-200 characters",
        examples=["Notes from a weekend trip to the coast"],
    )
    content: str | None = Field(
        default=None,
        description="Note body, at least 10 characters",
        examples=["Day one was sunny and long."],
    )


class NoteUpdate(CamelModel):
    """Schema for replacing a note's fields. All three must be non-empty."""

    title: str | None = None
    synopsis: str | None = None
    content: str | None = None


class NoteResponse(CamelModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str
    synopsis: str
    content: str
    author_id: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary | None = None


class NoteEnvelope(CamelModel):
    message: str
    note: NoteResponse


class NoteListEnvelope(CamelModel):
    message: str
    notes: list[NoteResponse]
