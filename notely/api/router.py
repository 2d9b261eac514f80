"""
API Router.

Aggregates all endpoint routers under /api.
"""

from typing import Any

from fastapi import APIRouter

from notely.api.endpoints import auth, notes, users

router = APIRouter()


@router.get("", summary="API directory")
async def api_index() -> dict[str, Any]:
    return {
        "message": "Welcome to the Notely API",
        "endpoints": {
            "auth": "/api/auth/*",
            "notes": "/api/notes/*",
            "entries": "/api/entries/*",
            "user": "/api/user/*",
        },
    }


router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
# Storage name alias for the same routes
router.include_router(notes.router, prefix="/entries", tags=["entries"])
router.include_router(users.router, prefix="/user", tags=["user"])
