"""
Artfolio Backend — User Service (Profiles & Artist Directory)
==============================================================

What:  Own-profile reads/updates, profile images, the public artist
       directory and the saved-artists list.
Who:   Called by the /user route handlers.

Saved Artists:
    Stored as rows in the saved_artists association table and always
    resolved with an explicit join. The list is returned in the order the
    artists were saved.

    save    ─ target must be an artist ─ duplicate → ConflictError
    unsave  ─ target must be an artist ─ not saved → no-op, list unchanged
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, desc, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.exceptions import (
    ArtfolioError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from artfolio.models.user import User, UserRole, saved_artists
from artfolio.schemas.user import (
    ProfileImageResponse,
    ProfileUpdate,
    UserAccount,
    UserProfile,
    UserPublic,
)
from artfolio.services.auth_service import Identity
from artfolio.services.lookups import get_artist, parse_id
from artfolio.services.media_service import MediaKind, media_service

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for user profiles and the artist directory.

    Error Handling Strategy:
        ArtfolioError subclasses propagate untouched; SQLAlchemy failures are
        wrapped in DatabaseError so driver details never reach the client.
    """

    async def _saved_artist_ids(self, db: AsyncSession, user_id: uuid.UUID) -> List[uuid.UUID]:
        result = await db.execute(
            select(saved_artists.c.artist_id)
            .where(saved_artists.c.user_id == user_id)
            .order_by(saved_artists.c.saved_at, saved_artists.c.artist_id)
        )
        return list(result.scalars().all())

    async def _build_profile(self, db: AsyncSession, user: User) -> UserProfile:
        saved = await self._saved_artist_ids(db, user.id)
        return UserProfile.model_validate(user).model_copy(update={"saved_artists": saved})

    # ── Own profile ───────────────────────────────────────────────────────

    async def get_own_profile(self, db: AsyncSession, identity: Identity) -> UserProfile:
        try:
            return await self._build_profile(db, identity.user)
        except SQLAlchemyError as e:
            logger.error("Database error loading profile %s: %s", identity.id, str(e))
            raise DatabaseError(context={"user_id": str(identity.id)})

    async def update_profile(
        self,
        db: AsyncSession,
        identity: Identity,
        data: ProfileUpdate,
    ) -> UserProfile:
        """
        Apply a partial profile update.

        Fields that were not sent, or were sent as null, keep their value.
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        user = identity.user
        try:
            for field, value in changes.items():
                setattr(user, field, value)
            if changes:
                await db.flush()
                logger.info("Updated profile %s: %s", user.id, ", ".join(sorted(changes)))
            return await self._build_profile(db, user)
        except SQLAlchemyError as e:
            logger.error("Database error updating profile %s: %s", user.id, str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(user.id)})

    async def update_profile_image(
        self,
        db: AsyncSession,
        identity: Identity,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str],
        content_length: Optional[int] = None,
    ) -> ProfileImageResponse:
        """
        Store a new profile picture and point the profile at its thumbnail.

        Raises:
            ValidationError: no file in the request
            UnsupportedMediaTypeError / PayloadTooLargeError: from MediaService
        """
        if content is None:
            raise ValidationError(message="No file uploaded", field="profileImage")

        stored = await media_service.store(
            MediaKind.PROFILE,
            filename=filename,
            content=content,
            content_type=content_type,
            content_length=content_length,
        )

        user = identity.user
        try:
            user.profile_image = stored.thumbnail
            await db.flush()
            profile = await self._build_profile(db, user)
        except SQLAlchemyError as e:
            await media_service.cleanup(MediaKind.PROFILE, stored.filenames)
            logger.error("Database error saving profile image for %s: %s", user.id, str(e))
            raise DatabaseError(context={"user_id": str(user.id)})

        return ProfileImageResponse(success=True, profile_image=stored.thumbnail, user=profile)

    # ── Directory ─────────────────────────────────────────────────────────

    async def get_public_profile(self, db: AsyncSession, user_id: str) -> UserPublic:
        parsed = parse_id(user_id, "user")
        try:
            user = await db.get(User, parsed)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", parsed, str(e))
            raise DatabaseError(context={"user_id": str(parsed)})

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(parsed))
        return UserPublic.model_validate(user)

    async def list_artists(self, db: AsyncSession) -> List[UserAccount]:
        """All artist accounts, newest first."""
        try:
            result = await db.execute(
                select(User)
                .where(User.role == UserRole.ARTIST.value)
                .order_by(desc(User.created_at), desc(User.id))
            )
            return [UserAccount.model_validate(user) for user in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing artists: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    # ── Saved artists ─────────────────────────────────────────────────────

    async def save_artist(
        self,
        db: AsyncSession,
        identity: Identity,
        artist_id: str,
    ) -> List[uuid.UUID]:
        """
        Add an artist to the caller's saved list.

        Returns:
            The saved artist ids after the change.

        Raises:
            NotFoundError: target missing or not an artist
            ConflictError: already saved
        """
        try:
            artist = await get_artist(db, artist_id)
            saved = await self._saved_artist_ids(db, identity.id)
            if artist.id in saved:
                raise ConflictError(
                    message="Artist already saved",
                    context={"artist_id": str(artist.id)},
                )

            await db.execute(
                insert(saved_artists).values(user_id=identity.id, artist_id=artist.id)
            )
            await db.flush()
            logger.info("User %s saved artist %s", identity.id, artist.id)
            return await self._saved_artist_ids(db, identity.id)
        except ArtfolioError:
            raise
        except IntegrityError:
            raise ConflictError(message="Artist already saved", context={"artist_id": str(artist_id)})
        except SQLAlchemyError as e:
            logger.error("Database error saving artist: %s", str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(identity.id)})

    async def unsave_artist(
        self,
        db: AsyncSession,
        identity: Identity,
        artist_id: str,
    ) -> List[uuid.UUID]:
        """Remove an artist from the saved list; removing an unsaved artist is a no-op."""
        try:
            artist = await get_artist(db, artist_id)
            result = await db.execute(
                delete(saved_artists).where(
                    saved_artists.c.user_id == identity.id,
                    saved_artists.c.artist_id == artist.id,
                )
            )
            if result.rowcount:
                logger.info("User %s unsaved artist %s", identity.id, artist.id)
            return await self._saved_artist_ids(db, identity.id)
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error unsaving artist: %s", str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(identity.id)})

    async def list_saved_artists(self, db: AsyncSession, identity: Identity) -> List[UserPublic]:
        """Resolve the saved references to public artist profiles."""
        try:
            result = await db.execute(
                select(User)
                .join(saved_artists, saved_artists.c.artist_id == User.id)
                .where(saved_artists.c.user_id == identity.id)
                .order_by(saved_artists.c.saved_at, saved_artists.c.artist_id)
            )
            return [UserPublic.model_validate(user) for user in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing saved artists: %s", str(e), exc_info=True)
            raise DatabaseError(context={"user_id": str(identity.id)})


user_service = UserService()
