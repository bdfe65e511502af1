"""
Artfolio Backend — User Routes
===============================

What:  Own profile, profile image upload, artist directory and saved artists.

Route order matters here: the fixed paths (/profile, /artists/all, ...) are
declared before /user/{user_id}, otherwise "profile" would be captured as an
id and answered with a 404.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.dependencies import get_identity
from artfolio.schemas.common import ErrorResponse
from artfolio.schemas.user import (
    ProfileImageResponse,
    ProfileUpdate,
    UserAccount,
    UserProfile,
    UserPublic,
)
from artfolio.services.auth_service import Identity
from artfolio.services.media_service import MediaKind, media_service
from artfolio.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


# ── Own profile ───────────────────────────────────────────────────────────


@router.get(
    "/profile",
    response_model=UserProfile,
    responses={401: {"model": ErrorResponse}},
    summary="Get the signed-in user's profile",
)
async def get_profile(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await user_service.get_own_profile(db, identity)


@router.put(
    "/profile",
    response_model=UserProfile,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Update the signed-in user's profile",
)
async def update_profile(
    data: ProfileUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await user_service.update_profile(db, identity, data)


@router.post(
    "/profile-image",
    response_model=ProfileImageResponse,
    responses={
        400: {"description": "No file uploaded", "model": ErrorResponse},
        413: {"description": "Image larger than 5MB", "model": ErrorResponse},
        415: {"description": "Not an image", "model": ErrorResponse},
    },
    summary="Upload a new profile picture",
)
async def upload_profile_image(
    profile_image: Optional[UploadFile] = File(
        default=None,
        alias="profileImage",
        description="Image file (max 5MB); stored with a 300x300 thumbnail",
    ),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ProfileImageResponse:
    if profile_image is None or not profile_image.filename:
        return await user_service.update_profile_image(db, identity, None, None, None)

    content = await media_service.read_upload(MediaKind.PROFILE, profile_image)
    logger.info(
        "Received profile image: filename=%s, size=%d bytes",
        profile_image.filename,
        len(content),
    )
    return await user_service.update_profile_image(
        db,
        identity,
        filename=profile_image.filename,
        content=content,
        content_type=profile_image.content_type,
        content_length=profile_image.size,
    )


# ── Directory & saved artists ─────────────────────────────────────────────


@router.get("/artists/all", response_model=List[UserAccount], summary="List all artists")
async def list_artists(
    db: AsyncSession = Depends(get_db_session),
) -> List[UserAccount]:
    return await user_service.list_artists(db)


@router.get("/saved-artists", response_model=List[UserPublic], summary="List saved artists")
async def list_saved_artists(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserPublic]:
    return await user_service.list_saved_artists(db, identity)


@router.post(
    "/save-artist/{artist_id}",
    response_model=List[str],
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Save an artist",
)
async def save_artist(
    artist_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[str]:
    """Returns the caller's saved artist ids after the change."""
    saved = await user_service.save_artist(db, identity, artist_id)
    return [str(i) for i in saved]


@router.delete(
    "/save-artist/{artist_id}",
    response_model=List[str],
    responses={404: {"model": ErrorResponse}},
    summary="Remove an artist from the saved list",
)
async def unsave_artist(
    artist_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[str]:
    saved = await user_service.unsave_artist(db, identity, artist_id)
    return [str(i) for i in saved]


# ── Public profile (keep last) ────────────────────────────────────────────


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    responses={404: {"model": ErrorResponse}},
    summary="Public profile of any user",
)
async def get_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> UserPublic:
    return await user_service.get_public_profile(db, user_id)
