"""
Artfolio Backend — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table plus the `saved_artists` association.
Why:   Users are both the credential store (email + password hash) and the
       public directory of artists.
Who:   AuthService (register/login), UserService (profile, directory,
       saved artists), ArtworkService and EnquiryService (artist lookups).

Table Design:
    - email is stored trimmed and lower-cased; the unique index enforces one
      account per address even when a pre-check races.
    - password_hash holds the full bcrypt string (salt included). No column
      ever holds the plaintext.
    - social_links / categories are JSON: they are read and written as a
      whole and never queried on.
    - saved_artists is a plain association table rather than a relationship;
      services join it explicitly.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Table,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from artfolio.database import Base

DEFAULT_PROFILE_IMAGE = "default-profile.jpg"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    ARTIST = "artist"
    CLIENT = "client"


# Who saved whom. Composite primary key makes a duplicate save impossible at
# the storage level as well as in UserService.
saved_artists = Table(
    "saved_artists",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("artist_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "saved_at",
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
)


class User(Base):
    """
    A registered account: either an artist (publishes artworks, receives
    enquiries) or a client (browses, saves artists, sends enquiries).

    Lifecycle:
        1. Created at registration
        2. Mutated by login (last_login), profile edits and image uploads
        3. Never hard-deleted
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    display_name: Mapped[str] = mapped_column(String(120), nullable=False)

    profile_image: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_PROFILE_IMAGE,
        server_default=text(f"'{DEFAULT_PROFILE_IMAGE}'"),
    )
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    professional_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    social_links: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    categories: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    last_login: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Artist directory lists newest accounts first, filtered by role
    __table_args__ = (
        Index("idx_users_role_created_at", "role", created_at.desc()),
    )

    @property
    def is_artist(self) -> bool:
        return self.role == UserRole.ARTIST.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}', email='{self.email}')>"
