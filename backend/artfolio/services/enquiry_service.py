"""
Artfolio Backend — Enquiry Service (Status Workflow)
=====================================================

What:  Creating enquiries, the artist's inbox, and status changes.
Who:   Called by the /enquiries route handlers.

Access Rules:
    create       anyone; linked to the sender's account only if the sender
                 is a signed-in client
    list         artists only (their own inbox)
    get          target artist only; pending → read on first open
    set status   target artist only; any of the four statuses

Status transition rules live next to the model (models/enquiry.py); this
service decides who may trigger them.
"""

import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.exceptions import (
    ArtfolioError,
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from artfolio.models.enquiry import Enquiry, EnquiryStatus, status_after_read
from artfolio.schemas.enquiry import EnquiryCreate, EnquiryResponse
from artfolio.services.auth_service import Identity
from artfolio.services.lookups import get_artist, parse_id

logger = logging.getLogger(__name__)


class EnquiryService:
    """
    Business logic for artist enquiries.

    Error Handling Strategy:
        ArtfolioError subclasses propagate as-is; SQLAlchemy failures become
        DatabaseError with the enquiry id in the log context.
    """

    async def create_enquiry(
        self,
        db: AsyncSession,
        data: EnquiryCreate,
        sender: Optional[Identity] = None,
    ) -> EnquiryResponse:
        """
        Record an enquiry for an artist. Always starts as `pending`.

        Raises:
            NotFoundError: artist_id does not name an artist
        """
        try:
            artist = await get_artist(db, data.artist_id)

            enquiry = Enquiry(
                artist_id=artist.id,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email.lower(),
                message=data.message,
                status=EnquiryStatus.PENDING.value,
            )
            if sender is not None and sender.is_client:
                enquiry.client_id = sender.id

            db.add(enquiry)
            await db.flush()
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error creating enquiry: %s", str(e), exc_info=True)
            raise DatabaseError(context={"artist_id": data.artist_id})

        logger.info(
            "Enquiry %s sent to artist %s (client=%s)",
            enquiry.id,
            enquiry.artist_id,
            enquiry.client_id,
        )
        return EnquiryResponse.model_validate(enquiry)

    async def list_for_artist(self, db: AsyncSession, identity: Identity) -> List[EnquiryResponse]:
        """The caller's inbox, newest first."""
        if not identity.is_artist:
            raise ForbiddenError(
                message="Only artists can view enquiries",
                context={"user_id": str(identity.id)},
            )
        try:
            result = await db.execute(
                select(Enquiry)
                .where(Enquiry.artist_id == identity.id)
                .order_by(desc(Enquiry.date_sent), desc(Enquiry.id))
            )
            return [EnquiryResponse.model_validate(e) for e in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing enquiries for %s: %s", identity.id, str(e))
            raise DatabaseError(context={"artist_id": str(identity.id)})

    async def _get_addressed(self, db: AsyncSession, identity: Identity, enquiry_id: str) -> Enquiry:
        parsed = parse_id(enquiry_id, "enquiry")
        enquiry = await db.get(Enquiry, parsed)
        if enquiry is None:
            raise NotFoundError(resource="enquiry", resource_id=str(parsed))
        if enquiry.artist_id != identity.id:
            raise ForbiddenError(
                message="Not authorized to access this enquiry",
                context={"enquiry_id": str(parsed), "user_id": str(identity.id)},
            )
        return enquiry

    async def get_enquiry(self, db: AsyncSession, identity: Identity, enquiry_id: str) -> EnquiryResponse:
        """Open an enquiry; the first open marks it read."""
        try:
            enquiry = await self._get_addressed(db, identity, enquiry_id)
            next_status = status_after_read(enquiry.status)
            if next_status != enquiry.status:
                enquiry.status = next_status
                await db.flush()
                logger.info("Enquiry %s marked %s", enquiry.id, next_status)
            return EnquiryResponse.model_validate(enquiry)
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error fetching enquiry %s: %s", enquiry_id, str(e))
            raise DatabaseError(context={"enquiry_id": str(enquiry_id)})

    async def set_status(
        self,
        db: AsyncSession,
        identity: Identity,
        enquiry_id: str,
        status: Optional[str],
    ) -> EnquiryResponse:
        """
        Explicitly set an enquiry's status.

        Raises:
            ValidationError: status not one of pending/read/replied/archived
            NotFoundError / ForbiddenError: as for get_enquiry
        """
        if status not in EnquiryStatus.values():
            raise ValidationError(
                message="Invalid status",
                field="status",
                context={"allowed": EnquiryStatus.values(), "received": status},
            )

        try:
            enquiry = await self._get_addressed(db, identity, enquiry_id)
            if enquiry.status != status:
                logger.info("Enquiry %s status %s -> %s", enquiry.id, enquiry.status, status)
                enquiry.status = status
                await db.flush()
            return EnquiryResponse.model_validate(enquiry)
        except ArtfolioError:
            raise
        except SQLAlchemyError as e:
            logger.error("Database error updating enquiry %s: %s", enquiry_id, str(e))
            raise DatabaseError(context={"enquiry_id": str(enquiry_id)})


enquiry_service = EnquiryService()
