"""Identifier parsing and record lookups shared by the domain services."""

import uuid
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from artfolio.exceptions import NotFoundError
from artfolio.models.user import User


def parse_id(value: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """Parse a path/body identifier; a malformed one is reported as not found."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=str(value), context={"malformed": True})


async def get_artist(db: AsyncSession, artist_id: Union[str, uuid.UUID]) -> User:
    """Load a user that must exist and have the artist role."""
    parsed = parse_id(artist_id, "artist")
    user = await db.get(User, parsed)
    if user is None or not user.is_artist:
        raise NotFoundError(resource="artist", resource_id=str(parsed))
    return user
