"""
Artfolio Backend — Artwork Schemas
===================================

Listing items carry the restricted ArtistSummary; the detail view carries the
artist's full public profile. Both are built from explicit joins in
ArtworkService, never from lazy relationship loading.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from artfolio.schemas.user import ArtistSummary, UserPublic


class ArtworkUpdate(BaseModel):
    """Only the fields present in the request body are changed."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None

    model_config = {"str_strip_whitespace": True}


class ArtworkResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    category: str
    image: str = Field(description="Original upload filename under /uploads/artworks/")
    thumbnail: Optional[str] = Field(default=None, description="400px bounded thumbnail")
    medium: Optional[str] = Field(default=None, description="1200px bounded detail image")
    tags: List[str] = Field(default_factory=list)
    artist_id: uuid.UUID
    created_at: datetime

    model_config = {"from_attributes": True}


class ArtworkListItem(ArtworkResponse):
    artist: ArtistSummary


class ArtworkDetail(ArtworkResponse):
    artist: UserPublic


class ArtworkListResponse(BaseModel):
    """
    One page of artworks, newest first.

    pages = ceil(total / limit); a page past the end returns an empty list
    with the same totals.
    """
    artworks: List[ArtworkListItem]
    total: int = Field(description="Artworks matching the filters")
    page: int
    limit: int
    pages: int
