"""
User API Endpoints.

The caller's own profile, avatar, password and notes.
"""

from fastapi import APIRouter, File, UploadFile

from notely.core.config import get_app_config
from notely.core.dependencies import CurrentUser, DbSession, Media, PasswordRounds
from notely.schemas.base import MessageResponse
from notely.schemas.note import NoteListEnvelope, NoteResponse
from notely.schemas.user import (
    AvatarResponse,
    PasswordUpdate,
    ProfileResponse,
    ProfileUpdate,
    UserResponse,
)
from notely.services.note import NoteService
from notely.services.profile import ProfileService

router = APIRouter()


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get own profile",
)
async def get_profile(db: DbSession, user: CurrentUser) -> ProfileResponse:
    profile = await ProfileService(db).get_profile(user.id)
    return ProfileResponse(
        message="Profile retrieved successfully",
        user=UserResponse.model_validate(profile),
    )


@router.api_route(
    "/profile",
    methods=["PUT", "PATCH"],
    response_model=ProfileResponse,
    summary="Update own profile",
    description="Partial update; omitted fields are left unchanged.",
)
@router.api_route(
    "",
    methods=["PUT", "PATCH"],
    response_model=ProfileResponse,
    include_in_schema=False,
)
async def update_profile(data: ProfileUpdate, db: DbSession, user: CurrentUser) -> ProfileResponse:
    profile = await ProfileService(db).update_profile(user.id, data)
    return ProfileResponse(
        message="Profile updated successfully",
        user=UserResponse.model_validate(profile),
    )


@router.post(
    "/avatar",
    response_model=AvatarResponse,
    summary="Upload avatar",
    description="Multipart upload in the 'avatar' field. Images only, up to 5MB.",
)
async def upload_avatar(
    db: DbSession,
    user: CurrentUser,
    media: Media,
    avatar: UploadFile | None = File(default=None),
) -> AvatarResponse:
    media_config = get_app_config().media
    service = ProfileService(
        db,
        media=media,
        max_upload_bytes=media_config.max_upload_bytes,
        allowed_mime_prefix=media_config.allowed_mime_prefix,
    )

    # One byte past the cap is enough to reject an oversized file
    content = await avatar.read(media_config.max_upload_bytes + 1) if avatar is not None else None
    profile = await service.upload_avatar(
        user.id,
        content,
        filename=avatar.filename if avatar is not None else None,
        content_type=avatar.content_type if avatar is not None else None,
    )
    return AvatarResponse(
        message="Avatar uploaded successfully",
        user=UserResponse.model_validate(profile),
        avatar_url=profile.avatar,
    )


@router.api_route(
    "/password",
    methods=["PUT", "PATCH"],
    response_model=MessageResponse,
    summary="Change password",
)
async def update_password(
    data: PasswordUpdate,
    db: DbSession,
    user: CurrentUser,
    rounds: PasswordRounds,
) -> MessageResponse:
    await ProfileService(db, password_rounds=rounds).update_password(user.id, data)
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/notes",
    response_model=NoteListEnvelope,
    summary="List own notes",
)
async def list_user_notes(db: DbSession, user: CurrentUser) -> NoteListEnvelope:
    entries = await NoteService(db).list_user_notes(user.id)
    return NoteListEnvelope(
        message="User notes retrieved successfully",
        notes=[NoteResponse.model_validate(e) for e in entries],
    )
