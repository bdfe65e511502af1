"""
Artfolio Backend — Auth Routes
===============================

What:  Registration, login and session validation.
Who:   Called by the frontend sign-up/sign-in forms and on every page load
       (validate) to restore a session from a stored token.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.dependencies import get_identity
from artfolio.schemas.common import ErrorResponse
from artfolio.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserAccount, ValidateResponse
from artfolio.services.auth_service import Identity, auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    """Create an artist or client account and return a session token for it."""
    return await auth_service.register(db, data)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Wrong email or password", "model": ErrorResponse}},
    summary="Sign in",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(db, data)


@router.get(
    "/validate",
    response_model=ValidateResponse,
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
    summary="Check a session token",
)
async def validate(identity: Identity = Depends(get_identity)) -> ValidateResponse:
    return ValidateResponse(user=UserAccount.model_validate(identity.user))
