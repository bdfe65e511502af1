"""
Artfolio Backend — Request Context Dependencies
================================================

What:  FastAPI dependencies that build the explicit per-request context:
       the database session and the caller's Identity.
Why:   Handlers declare what they need in their signature; nothing is
       attached to a shared request object behind their back.

Token sources, in order:
    1. Authorization: Bearer <token>
    2. x-auth-token: <token>     (header used by older frontend builds)
"""

import logging
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.database import get_db_session
from artfolio.exceptions import UnauthorizedError
from artfolio.services.auth_service import Identity, auth_service

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must become our 401 body, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    x_auth_token: Optional[str] = Header(default=None, alias="x-auth-token"),
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if x_auth_token:
        return x_auth_token.strip() or None
    return None


async def get_identity(
    token: Optional[str] = Depends(extract_token),
    db: AsyncSession = Depends(get_db_session),
) -> Identity:
    """Require a valid session; 401 otherwise."""
    return await auth_service.resolve_identity(db, token)


async def get_optional_identity(
    token: Optional[str] = Depends(extract_token),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Identity]:
    """
    Identity for public routes that behave differently for signed-in callers.

    A bad or expired token is treated as anonymous rather than rejected.
    """
    if not token:
        return None
    try:
        return await auth_service.resolve_identity(db, token)
    except UnauthorizedError as e:
        logger.debug("Ignoring unusable token on public route: %s", e.message)
        return None
