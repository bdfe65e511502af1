"""
Artfolio Backend — Artwork Service (Catalog)
=============================================

What:  Artwork CRUD with role and ownership checks, plus paginated listing.
Who:   Called by the /artworks route handlers.

Orchestration Flow (POST /artworks):
    ┌──────────┐   ┌────────────┐   ┌──────────────┐   ┌──────────┐
    │ Identity │──▶│  Validate  │──▶│ MediaService │──▶│  Insert  │
    │  artist? │   │  fields    │   │ store+resize │   │  (DB)    │
    └──────────┘   └────────────┘   └──────────────┘   └──────────┘
    Insert fails → stored files are removed again.

Ownership:
    update/delete look the artwork up first (404), then compare its
    artist_id with the caller (403). Nobody but the owner can change or
    remove an artwork; there is no admin override.

Pagination:
    Offset-based (page/limit) because the frontend shows numbered pages.
    Ordering is created_at DESC with id as a tie-breaker so page boundaries
    are stable.
"""

import logging
import math
import uuid
from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.exceptions import (
    ArtfolioError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from artfolio.models.artwork import Artwork
from artfolio.models.user import User
from artfolio.schemas.artwork import (
    ArtworkDetail,
    ArtworkListItem,
    ArtworkListResponse,
    ArtworkResponse,
    ArtworkUpdate,
)
from artfolio.schemas.user import ArtistSummary, UserPublic
from artfolio.services.auth_service import Identity
from artfolio.services.lookups import parse_id
from artfolio.services.media_service import MediaKind, media_service

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE = 10_000


def parse_tags(raw: Optional[str]) -> List[str]:
    """Split a comma-separated form field into trimmed, de-duplicated tags."""
    if not raw:
        return []
    tags: List[str] = []
    for part in raw.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _list_item(artwork: Artwork, artist: User) -> ArtworkListItem:
    return ArtworkListItem(
        **ArtworkResponse.model_validate(artwork).model_dump(),
        artist=ArtistSummary.model_validate(artist),
    )


class ArtworkService:
    """
    Business logic for the artwork catalog.

    Every public method either returns a response model or raises an
    ArtfolioError; database failures surface as DatabaseError.
    """

    async def create_artwork(
        self,
        db: AsyncSession,
        identity: Identity,
        title: Optional[str],
        category: Optional[str],
        description: Optional[str],
        tags: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str],
        content_length: Optional[int] = None,
    ) -> ArtworkResponse:
        """
        Create an artwork owned by the calling artist.

        Raises:
            ForbiddenError: caller is not an artist
            ValidationError: title, category or image missing
            UnsupportedMediaTypeError / PayloadTooLargeError: from MediaService
        """
        if not identity.is_artist:
            raise ForbiddenError(
                message="Only artists can upload artworks",
                context={"user_id": str(identity.id), "role": identity.role},
            )

        title = (title or "").strip()
        category = (category or "").strip()
        if not title or not category:
            raise ValidationError(
                message="Title and category required",
                field="title" if not title else "category",
            )
        if content is None:
            raise ValidationError(message="Artwork image required", field="artworkImage")

        stored = await media_service.store(
            MediaKind.ARTWORK,
            filename=filename,
            content=content,
            content_type=content_type,
            content_length=content_length,
        )

        try:
            artwork = Artwork(
                title=title,
                description=(description or "").strip() or None,
                category=category,
                image=stored.original,
                thumbnail=stored.thumbnail,
                medium=stored.medium,
                tags=parse_tags(tags),
                artist_id=identity.id,
            )
            db.add(artwork)
            await db.flush()
        except SQLAlchemyError as e:
            await media_service.cleanup(MediaKind.ARTWORK, stored.filenames)
            logger.error("Database error creating artwork: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Problem creating artwork. Please try again.",
                context={"artist_id": str(identity.id)},
            )

        logger.info("Artist %s created artwork %s", identity.id, artwork.id)
        return ArtworkResponse.model_validate(artwork)

    async def list_artworks(
        self,
        db: AsyncSession,
        category: Optional[str] = None,
        artist_id: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> ArtworkListResponse:
        """
        One page of artworks, newest first, each with an artist summary.

        An artist filter that is not a valid id matches nothing rather than
        raising: filters narrow a listing, they do not address a resource.
        """
        filters = []
        if category:
            filters.append(Artwork.category == category)
        if artist_id:
            try:
                filters.append(Artwork.artist_id == uuid.UUID(artist_id))
            except ValueError:
                return ArtworkListResponse(artworks=[], total=0, page=page, limit=limit, pages=0)

        try:
            count_result = await db.execute(
                select(func.count(Artwork.id)).where(*filters)
            )
            total = count_result.scalar() or 0

            offset = (page - 1) * limit
            items = []
            if offset < total:
                result = await db.execute(
                    select(Artwork, User)
                    .join(User, Artwork.artist_id == User.id)
                    .where(*filters)
                    .order_by(desc(Artwork.created_at), desc(Artwork.id))
                    .offset(offset)
                    .limit(limit)
                )
                items = [_list_item(artwork, artist) for artwork, artist in result.all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing artworks: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Problem getting artworks. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return ArtworkListResponse(
            artworks=items,
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit) if total else 0,
        )

    async def get_artwork(self, db: AsyncSession, artwork_id: str) -> ArtworkDetail:
        """Single artwork joined with the full public profile of its artist."""
        parsed = parse_id(artwork_id, "artwork")
        try:
            result = await db.execute(
                select(Artwork, User)
                .join(User, Artwork.artist_id == User.id)
                .where(Artwork.id == parsed)
            )
            row = result.first()
        except SQLAlchemyError as e:
            logger.error("Database error fetching artwork %s: %s", parsed, str(e))
            raise DatabaseError(context={"artwork_id": str(parsed)})

        if row is None:
            raise NotFoundError(resource="artwork", resource_id=str(parsed))

        artwork, artist = row
        return ArtworkDetail(
            **ArtworkResponse.model_validate(artwork).model_dump(),
            artist=UserPublic.model_validate(artist),
        )

    async def _get_owned(self, db: AsyncSession, identity: Identity, artwork_id: str) -> Artwork:
        """Owner check: 404 when absent, 403 when someone else's."""
        parsed = parse_id(artwork_id, "artwork")
        artwork = await db.get(Artwork, parsed)
        if artwork is None:
            raise NotFoundError(resource="artwork", resource_id=str(parsed))
        if artwork.artist_id != identity.id:
            raise ForbiddenError(
                message="Only the artist who owns this artwork can change it",
                context={"artwork_id": str(parsed), "user_id": str(identity.id)},
            )
        return artwork

    async def update_artwork(
        self,
        db: AsyncSession,
        identity: Identity,
        artwork_id: str,
        data: ArtworkUpdate,
    ) -> ArtworkResponse:
        """Partial update: only the fields present in the request change."""
        changes = data.model_dump(exclude_unset=True)
        # title and category are required columns; null means "leave as is"
        for required in ("title", "category", "tags"):
            if required in changes and changes[required] is None:
                del changes[required]

        try:
            artwork = await self._get_owned(db, identity, artwork_id)
            for field, value in changes.items():
                setattr(artwork, field, value)
            if changes:
                await db.flush()
                logger.info("Artwork %s updated: %s", artwork.id, ", ".join(sorted(changes)))
            return ArtworkResponse.model_validate(artwork)
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating artwork %s: %s", artwork_id, str(e))
            raise DatabaseError(context={"artwork_id": str(artwork_id)})

    async def delete_artwork(self, db: AsyncSession, identity: Identity, artwork_id: str) -> None:
        """Remove an artwork and, best-effort, its image files."""
        try:
            artwork = await self._get_owned(db, identity, artwork_id)
            files = [artwork.image, artwork.thumbnail, artwork.medium]
            await db.delete(artwork)
            await db.flush()
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error deleting artwork %s: %s", artwork_id, str(e))
            raise DatabaseError(context={"artwork_id": str(artwork_id)})

        await media_service.cleanup(MediaKind.ARTWORK, files)
        logger.info("Artist %s deleted artwork %s", identity.id, artwork_id)

    async def list_by_artist(self, db: AsyncSession, artist_id: str) -> List[ArtworkResponse]:
        """Every artwork of one artist, newest first, unpaginated."""
        parsed = parse_id(artist_id, "artist")
        try:
            result = await db.execute(
                select(Artwork)
                .where(Artwork.artist_id == parsed)
                .order_by(desc(Artwork.created_at), desc(Artwork.id))
            )
            return [ArtworkResponse.model_validate(a) for a in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing artworks for %s: %s", parsed, str(e))
            raise DatabaseError(context={"artist_id": str(parsed)})


artwork_service = ArtworkService()
