"""
Artfolio Backend — Enquiry SQLAlchemy Model
============================================

What:  ORM model for the `enquiries` table and its status workflow.
Who:   EnquiryService.

Status Workflow:
    ┌─────────┐  first read by   ┌──────┐   artist sets    ┌─────────┐
    │ pending │ ───────────────▶ │ read │ ───────────────▶ │ replied │
    └─────────┘  target artist   └──────┘                  ├─────────┤
                                                           │archived │
                                                           └─────────┘

    - Creation always yields `pending`.
    - Reading moves `pending` to `read` and never touches any other status,
      so repeated reads cannot regress a replied/archived enquiry.
    - The target artist may set any of the four values explicitly
      (corrections included); nobody else may change the status.

Sender fields are copied onto the row: anonymous visitors can send enquiries,
and a client account is linked via client_id only when the sender was
signed in.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from artfolio.database import Base
from artfolio.models.user import utcnow


class EnquiryStatus(str, enum.Enum):
    PENDING = "pending"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


def status_after_read(current: str) -> str:
    """Status an enquiry takes once its target artist opens it."""
    if current == EnquiryStatus.PENDING.value:
        return EnquiryStatus.READ.value
    return current


class Enquiry(Base):
    __tablename__ = "enquiries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    artist_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    client_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EnquiryStatus.PENDING.value,
        server_default=text("'pending'"),
    )

    date_sent: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
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

    # An artist's inbox: WHERE artist_id = :id ORDER BY date_sent DESC
    __table_args__ = (
        Index("idx_enquiries_artist_date_sent", "artist_id", date_sent.desc()),
    )

    def __repr__(self) -> str:
        return f"<Enquiry(id={self.id}, artist_id={self.artist_id}, status='{self.status}')>"
