"""
Artfolio Backend — Artwork SQLAlchemy Model
============================================

What:  ORM model for the `artworks` table.
Who:   ArtworkService (CRUD, pagination) and UserService (nothing else).

Each artwork belongs to exactly one artist. The three image columns hold
bare filenames inside <storage_root>/artworks/: the untouched upload, the
400px listing thumbnail and the 1200px detail image.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from artfolio.database import Base
from artfolio.models.user import utcnow


class Artwork(Base):
    __tablename__ = "artworks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)

    image: Mapped[str] = mapped_column(String(255), nullable=False)
    thumbnail: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    medium: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    artist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Listing pages are always newest-first, optionally narrowed by category
    # or by artist.
    __table_args__ = (
        Index("idx_artworks_created_at", created_at.desc()),
        Index("idx_artworks_artist_created_at", "artist_id", created_at.desc()),
        Index("idx_artworks_category", "category"),
    )

    def __repr__(self) -> str:
        return f"<Artwork(id={self.id}, title='{self.title}', artist_id={self.artist_id})>"
