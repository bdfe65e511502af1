"""
Artfolio Backend — Artwork Routes
==================================

What:  Artwork upload, browsing and owner-only edits.
Who:   Called by the gallery pages and the artist dashboard.

Caching:
    GET /artworks/{id} carries a short private cache header; listings are
    not cached because new uploads must show up immediately.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.dependencies import get_identity
from artfolio.schemas.artwork import (
    ArtworkDetail,
    ArtworkListResponse,
    ArtworkResponse,
    ArtworkUpdate,
)
from artfolio.schemas.common import ErrorResponse, MessageResponse
from artfolio.services.artwork_service import DEFAULT_PAGE_SIZE, MAX_PAGE, artwork_service
from artfolio.services.auth_service import Identity
from artfolio.services.media_service import MediaKind, media_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/artworks", tags=["Artworks"])


@router.get(
    "",
    response_model=ArtworkListResponse,
    summary="Browse artworks",
    description="Newest first, optionally filtered by category and/or artist id.",
)
async def list_artworks(
    response: Response,
    category: Optional[str] = Query(default=None, description="Exact category name"),
    artist: Optional[str] = Query(default=None, description="Artist id"),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=100, description="Items per page (max 100)"),
    db: AsyncSession = Depends(get_db_session),
) -> ArtworkListResponse:
    result = await artwork_service.list_artworks(
        db,
        category=category,
        artist_id=artist,
        page=page,
        limit=limit,
    )
    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.post(
    "",
    status_code=201,
    response_model=ArtworkResponse,
    responses={
        400: {"description": "Title, category or image missing", "model": ErrorResponse},
        403: {"description": "Caller is not an artist", "model": ErrorResponse},
        413: {"description": "Image larger than 10MB", "model": ErrorResponse},
        415: {"description": "Not an image", "model": ErrorResponse},
    },
    summary="Upload an artwork",
)
async def create_artwork(
    title: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    tags: Optional[str] = Form(default=None, description="Comma-separated tags"),
    artwork_image: Optional[UploadFile] = File(default=None, alias="artworkImage"),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ArtworkResponse:
    """
    Multipart upload. The image is stored with a 400px thumbnail and a
    1200px medium variant before the record is written.
    """
    content = None
    filename = content_type = None
    content_length = None
    if artwork_image is not None and artwork_image.filename:
        content = await media_service.read_upload(MediaKind.ARTWORK, artwork_image)
        filename = artwork_image.filename
        content_type = artwork_image.content_type
        content_length = artwork_image.size
        logger.info("Received artwork upload: filename=%s, size=%d bytes", filename, len(content))

    return await artwork_service.create_artwork(
        db,
        identity,
        title=title,
        category=category,
        description=description,
        tags=tags,
        filename=filename,
        content=content,
        content_type=content_type,
        content_length=content_length,
    )


@router.get(
    "/artist/{user_id}",
    response_model=List[ArtworkResponse],
    responses={404: {"model": ErrorResponse}},
    summary="All artworks of one artist",
)
async def list_by_artist(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[ArtworkResponse]:
    return await artwork_service.list_by_artist(db, user_id)


@router.get(
    "/{artwork_id}",
    response_model=ArtworkDetail,
    responses={404: {"model": ErrorResponse}},
    summary="Artwork with its artist's public profile",
)
async def get_artwork(
    artwork_id: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ArtworkDetail:
    result = await artwork_service.get_artwork(db, artwork_id)
    response.headers["Cache-Control"] = "private, max-age=60"
    return result


@router.put(
    "/{artwork_id}",
    response_model=ArtworkResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Edit an artwork (owner only)",
)
async def update_artwork(
    artwork_id: str,
    data: ArtworkUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ArtworkResponse:
    return await artwork_service.update_artwork(db, identity, artwork_id, data)


@router.delete(
    "/{artwork_id}",
    response_model=MessageResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete an artwork (owner only)",
)
async def delete_artwork(
    artwork_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await artwork_service.delete_artwork(db, identity, artwork_id)
    return MessageResponse(message="Artwork deleted")
