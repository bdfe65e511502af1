"""
Artfolio Backend — Enquiry Schemas
===================================

artist_id and status are plain strings on the way in: EnquiryService turns a
malformed artist id into a 404 and an unknown status into a 400, which is the
contract the frontend already handles.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class EnquiryCreate(BaseModel):
    artist_id: str = Field(description="ID of the artist the enquiry is addressed to")
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    message: str = Field(min_length=1, max_length=5000)

    model_config = {"str_strip_whitespace": True}


class EnquiryStatusUpdate(BaseModel):
    status: str = Field(description="One of: pending, read, replied, archived")


class EnquiryResponse(BaseModel):
    id: uuid.UUID
    artist_id: uuid.UUID
    client_id: Optional[uuid.UUID] = None
    first_name: str
    last_name: str
    email: str
    message: str
    status: str
    date_sent: datetime

    model_config = {"from_attributes": True}
