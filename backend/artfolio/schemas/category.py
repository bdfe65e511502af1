import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=255)

    model_config = {"str_strip_whitespace": True}


class CategoryResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
