"""
Artfolio Backend — Enquiry Routes
==================================

What:  Public enquiry submission and the artist's enquiry inbox.

    POST /enquiries               anyone (token optional)
    GET  /enquiries               artist inbox
    GET  /enquiries/{id}          target artist; marks pending as read
    PUT  /enquiries/{id}/status   target artist
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.dependencies import get_identity, get_optional_identity
from artfolio.schemas.common import ErrorResponse
from artfolio.schemas.enquiry import EnquiryCreate, EnquiryResponse, EnquiryStatusUpdate
from artfolio.services.auth_service import Identity
from artfolio.services.enquiry_service import enquiry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/enquiries", tags=["Enquiries"])


@router.post(
    "",
    status_code=201,
    response_model=EnquiryResponse,
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        404: {"description": "Artist not found", "model": ErrorResponse},
    },
    summary="Send an enquiry to an artist",
)
async def create_enquiry(
    data: EnquiryCreate,
    sender: Optional[Identity] = Depends(get_optional_identity),
    db: AsyncSession = Depends(get_db_session),
) -> EnquiryResponse:
    return await enquiry_service.create_enquiry(db, data, sender)


@router.get(
    "",
    response_model=List[EnquiryResponse],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="The signed-in artist's enquiries",
)
async def list_enquiries(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[EnquiryResponse]:
    return await enquiry_service.list_for_artist(db, identity)


@router.get(
    "/{enquiry_id}",
    response_model=EnquiryResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Open an enquiry",
)
async def get_enquiry(
    enquiry_id: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> EnquiryResponse:
    return await enquiry_service.get_enquiry(db, identity, enquiry_id)


@router.put(
    "/{enquiry_id}/status",
    response_model=EnquiryResponse,
    responses={
        400: {"description": "Unknown status", "model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Change an enquiry's status",
)
async def set_enquiry_status(
    enquiry_id: str,
    data: EnquiryStatusUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
) -> EnquiryResponse:
    return await enquiry_service.set_status(db, identity, enquiry_id, data.status)
